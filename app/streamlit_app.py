from datetime import date
from typing import List

import streamlit as st
from pydantic import ValidationError

from carprices.config import Settings
from carprices.exceptions import CarPricesError
from carprices.models.predict import ModelRegistry, PredictionService
from carprices.schema import CarListing
from carprices.web.lookup import CarFileModelService

st.set_page_config(page_title="Car Price Predictor", layout="wide")
st.title("Car Price Predictor")

settings = Settings.from_env()


@st.cache_resource
def load_service(model_path: str, model_name: str) -> PredictionService:
    registry = ModelRegistry()
    registry.load(model_name, model_path)
    return PredictionService(registry, model_name=model_name)


@st.cache_resource
def load_lookup(car_models_path: str) -> CarFileModelService:
    return CarFileModelService(car_models_path)


try:
    service = load_service(settings.model_path, settings.model_name)
except (CarPricesError, FileNotFoundError) as e:
    st.error(f"Model could not be loaded: {e}")
    st.stop()

lookup = load_lookup(settings.car_models_path)

st.sidebar.header("Car Details")

# Dropdowns
def select_model(make: str) -> str:
    options: List[str] = lookup.models_for(make)
    if options:
        return st.sidebar.selectbox("Model", options, index=0)
    return st.sidebar.text_input("Model", value="")

make = st.sidebar.selectbox("Make", lookup.makes(), index=0)
model = select_model(make)

# Number inputs
year = st.sidebar.number_input("Year", min_value=1951, max_value=date.today().year + 1, value=2015, step=1)
mileage = st.sidebar.number_input("Mileage", min_value=0, max_value=1_000_000, value=40000, step=1000)

col1, col2 = st.columns([2, 1])

with col1:
    if st.button("Predict Price"):
        try:
            listing = CarListing(year=year, mileage=mileage, make=make, model=model)
            prediction = service.predict(listing)
            st.markdown(f"<h1 style='margin:0'>\\${prediction.score:,.2f}</h1>", unsafe_allow_html=True)
            st.caption(f"Predicted price for a {int(year)} {make} {model}")
        except (ValidationError, CarPricesError) as e:
            st.error(f"Prediction failed: {e}")

with col2:
    st.caption(f"Model: {settings.model_name}")
    st.caption(f"Artifact: {settings.model_path}")

st.markdown("---")
