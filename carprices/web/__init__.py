"""
Flask front end for the price model.

`create_app()` builds the WSGI application from an injected prediction service
and make/model lookup service; `create_app_from_settings()` composes both from
configuration at startup.
"""
