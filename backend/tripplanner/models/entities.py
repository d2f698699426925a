# tripplanner/models/entities.py
from pydantic import BaseModel, Field
from typing import Any, List, Optional, Union


# Itinerary records. The planning API is loose about numeric fields inside
# a day (it sometimes sends "24" and sometimes 24), so those accept both.

class Activity(BaseModel):
    time: str = ""
    description: str


class Meal(BaseModel):
    type: str
    suggestion: str


class Transport(BaseModel):
    time: str = ""
    description: str


class Weather(BaseModel):
    date: str = ""
    temperature_celsius: Optional[Union[float, str]] = None
    condition: str = ""
    precipitation_chance: Optional[Union[float, str]] = None
    humidity: Optional[Union[float, str]] = None


class WeatherSummary(BaseModel):
    description: str = ""
    recommendations: str = ""


class Accommodation(BaseModel):
    name: str = ""
    address: str = ""
    details: str = ""


class DailyRoute(BaseModel):
    latitude: float
    longitude: float
    stop_name: str


class EstimatedCosts(BaseModel):
    activities: float = 0
    meals: float = 0
    transport: float = 0
    accommodation: float = 0

    @property
    def total(self) -> float:
        return self.activities + self.meals + self.transport + self.accommodation


class DailyItinerary(BaseModel):
    date: str
    activities: List[Activity]
    meals: List[Meal]
    transport: List[Transport]
    estimated_costs: EstimatedCosts
    weather: Optional[Weather] = None
    weather_summary: Optional[WeatherSummary] = None
    accommodation: Optional[Accommodation] = None
    local_events: List[Any] = []
    daily_route: List[DailyRoute] = []


class TripSummary(BaseModel):
    trip_dates: str = ""
    destination: str = ""
    budget: str = ""
    preferences: str = ""
    must_visit_places: str = ""
    trip_goal: str = ""


class EmergencyContacts(BaseModel):
    police: str = ""
    ambulance: str = ""
    tourist_helpline: str = ""


class UsefulPhrases(BaseModel):
    hello: str = ""
    thank_you: str = ""
    help: str = ""


class ItineraryResponse(BaseModel):
    trip_summary: TripSummary
    daily_itineraries: List[DailyItinerary]
    total_cost: float = 0
    recommendations: List[str] = []
    weather_forecast: List[Weather] = []
    transport_options: List[Any] = []
    emergency_contacts: Optional[EmergencyContacts] = None
    useful_phrases: Optional[UsefulPhrases] = None
    id: Optional[str] = None
    status: Optional[str] = None


# Weather / events

class WeatherInfo(BaseModel):
    date: str
    temperature_celsius: float
    condition: str
    precipitation_chance: float = 0
    humidity: float = 0


class LocalEvent(BaseModel):
    id: Optional[str] = None
    name: str
    date: str  # ISO date or datetime string
    venue: str = ""
    category: str = ""
    price_range: Optional[str] = None
    description: Optional[str] = None


class WeatherResponse(BaseModel):
    weather_forecast: List[WeatherInfo] = Field(default_factory=list)
    local_events: List[LocalEvent] = Field(default_factory=list)


class EventsResponse(BaseModel):
    events: List[LocalEvent] = Field(default_factory=list)


# Transport

class TransportDetails(BaseModel):
    route: str
    stops: Optional[List[str]] = None
    amenities: Optional[List[str]] = None


class TransportOption(BaseModel):
    mode: str
    provider: str = ""
    departure: str = ""
    arrival: str = ""
    price: Union[float, str] = ""  # number or display string, e.g. "$120"
    duration: Union[float, str] = ""  # minutes or display string, e.g. "2h 30m"
    details: Union[TransportDetails, str, None] = None


class TransportResponse(BaseModel):
    options: List[TransportOption] = Field(default_factory=list)
