"""
Display catalogues for event categories, transport modes and weather conditions.

Lookups never fail: an unknown key gets a neutral fallback entry built from
the key itself.
"""

from typing import Dict, List, Literal
from pydantic import BaseModel

Severity = Literal["low", "medium", "high"]


class EventCategory(BaseModel):
    id: str
    label: str
    icon: str
    color: str


class TransportMode(BaseModel):
    id: str
    label: str
    icon: str
    amenities: List[str] = []


class WeatherCondition(BaseModel):
    icon: str
    label: str
    severity: Severity


EVENT_CATEGORIES: Dict[str, EventCategory] = {
    "Music": EventCategory(id="music", label="Music", icon="musical-note", color="purple"),
    "Sports": EventCategory(id="sports", label="Sports", icon="trophy", color="green"),
    "Arts": EventCategory(id="arts", label="Arts", icon="paint-brush", color="blue"),
    "Food": EventCategory(id="food", label="Food", icon="cake", color="orange"),
}

TRANSPORT_MODES: Dict[str, TransportMode] = {
    "train": TransportMode(id="train", label="Train", icon="train", amenities=["WiFi", "Food Service", "Power Outlets"]),
    "bus": TransportMode(id="bus", label="Bus", icon="bus", amenities=["Air Conditioning", "WiFi"]),
    "flight": TransportMode(id="flight", label="Flight", icon="paper-airplane", amenities=["In-flight Meals", "Entertainment"]),
    "car": TransportMode(id="car", label="Car", icon="truck", amenities=["Air Conditioning", "Flexible Route"]),
}

WEATHER_CONDITIONS: Dict[str, WeatherCondition] = {
    "Sunny": WeatherCondition(icon="sun", label="Sunny", severity="low"),
    "Cloudy": WeatherCondition(icon="cloud", label="Cloudy", severity="low"),
    "Rainy": WeatherCondition(icon="cloud-rain", label="Rainy", severity="medium"),
    "Stormy": WeatherCondition(icon="cloud-lightning", label="Stormy", severity="high"),
    "Snowy": WeatherCondition(icon="cloud-snow", label="Snowy", severity="medium"),
}


def get_event_category(category: str) -> EventCategory:
    return EVENT_CATEGORIES.get(category) or EventCategory(
        id=category.lower(), label=category, icon="tag", color="gray"
    )


def get_transport_mode(mode: str) -> TransportMode:
    return TRANSPORT_MODES.get(mode.lower()) or TransportMode(
        id=mode.lower(), label=mode, icon="question", amenities=[]
    )


def get_weather_condition(condition: str) -> WeatherCondition:
    return WEATHER_CONDITIONS.get(condition) or WeatherCondition(
        icon="question", label=condition, severity="low"
    )
