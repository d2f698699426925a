from pydantic import BaseModel
from typing import List, Literal, Optional

AccommodationType = Literal["hotel", "hostel", "resort", "apartment", "guesthouse", "boutique hotel"]

ACCOMMODATION_TYPES = ("hotel", "hostel", "resort", "apartment", "guesthouse", "boutique hotel")


class TravelInput(BaseModel):
    origin: str
    destination: str
    start_date: str  # ISO date string (YYYY-MM-DD)
    return_date: str  # ISO date string (YYYY-MM-DD)


class DateRange(BaseModel):
    start_date: str
    return_date: str


class UserPreferences(BaseModel):
    budget: float = 1000
    activities: List[str] = []
    meal_preferences: List[str] = []
    preferred_places: List[str] = []
    transport_preferences: List[str] = []
    accommodation_type: Optional[AccommodationType] = "hotel"


class GenerateItineraryRequest(BaseModel):
    travel_input: TravelInput
    user_preferences: UserPreferences
