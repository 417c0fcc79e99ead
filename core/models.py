from datetime import date, datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ConditionType = Literal["Clear", "Clouds", "Rain", "Thunderstorm", "Snow", "Mist", "Fog"]
IntentType = Literal["weather", "activity", "accommodation", "transport", "general"]
SuitabilityTier = Literal["excellent", "good", "fair", "poor", "unknown"]
DayVerdict = Literal["good", "fair", "poor"]
TimeSlot = Literal["morning", "afternoon", "evening"]


class IntentEntities(BaseModel):
    """Things we can pull out of a message without asking the user again"""
    location: Optional[str] = None
    time_reference: Optional[str] = None
    activities: List[str] = []


class Intent(BaseModel):
    type: IntentType
    confidence: float
    entities: IntentEntities
    scores: Dict[str, int]
    raw_message: str = ""


class SnapshotTemperature(BaseModel):
    model_config = ConfigDict(frozen=True)

    current: int
    feels_like: int
    min: int
    max: int


class WeatherSnapshot(BaseModel):
    """A single point-in-time reading for one location, in metric units."""
    model_config = ConfigDict(frozen=True)

    location: str
    temperature: SnapshotTemperature
    condition: ConditionType
    description: str = ""
    humidity: int = 0
    pressure: int = 0
    wind_speed: float = 0.0  # m/s
    wind_direction: int = 0
    cloud_cover: int = 0
    visibility: int = 0
    precipitation: float = 0.0
    # Current readings never carry a probability, only forecast points do
    precipitation_probability: Optional[int] = None
    observed_at: datetime


class PointTemperature(BaseModel):
    model_config = ConfigDict(frozen=True)

    temp: int
    feels_like: int
    min: int
    max: int


class ForecastPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    temperature: PointTemperature
    condition: ConditionType
    humidity: int
    wind_speed: float
    cloud_cover: int
    precipitation_probability: int
    rain: float = 0.0


class DailyTemperature(BaseModel):
    min: int
    avg: int
    max: int


class DailySummary(BaseModel):
    date: date
    label: str
    temperature: DailyTemperature
    condition: ConditionType
    avg_humidity: int
    avg_wind_speed: float
    total_rain: float
    precipitation_probability: int
    suitability: DayVerdict


class BestTimeOfDay(BaseModel):
    best_time: TimeSlot
    score: float
    all_scores: Dict[str, float]
    recommendation: str


class ActivityAssessment(BaseModel):
    activity: str
    activity_key: Optional[str] = None
    suitability: SuitabilityTier
    score: int = Field(ge=0, le=100)
    category: Optional[str] = None
    issues: List[str] = []
    recommendations: List[str] = []
    weather_condition: Optional[str] = None
    best_day: Optional[str] = None
    best_day_score: Optional[int] = None
    reason: Optional[str] = None


class AlternativeActivity(BaseModel):
    activity: str
    reason: str


class BestDay(BaseModel):
    activity: str
    best_day: Optional[str] = None
    score: Optional[int] = None
    condition: Optional[str] = None
    reason: str


class ActivitySummary(BaseModel):
    total: int
    excellent: int
    good: int
    fair: int
    poor: int
    overall_suitability: str


class ActivityAnalysis(BaseModel):
    has_activities: bool
    assessments: List[ActivityAssessment] = []
    conflicts: List[ActivityAssessment] = []
    alternatives: List[AlternativeActivity] = []
    summary: Optional[ActivitySummary] = None


class PackingSummary(BaseModel):
    total_items: int
    temperature_range: Optional[str] = None
    weather_variety: str = ""
    rain_expected: bool = False
    packing_tips: List[str] = []


class PackingList(BaseModel):
    clothing: List[str] = []
    accessories: List[str] = []
    activity_gear: List[str] = []
    essentials: List[str] = []
    special: List[str] = []
    summary: PackingSummary


class ResponseAction(BaseModel):
    type: str
    label: str
    data: Dict[str, Any] = {}


class AdvisorResponse(BaseModel):
    """What every handler hands back for one chat turn"""
    text: str
    data: Dict[str, Any] = {}
    suggestions: List[str] = []
    actions: List[ResponseAction] = []


class ConversationContext(BaseModel):
    """What we remember about a user between chat turns"""
    destination: Optional[str] = None
    activities: List[str] = []
    time_reference: Optional[str] = None
    last_intent: Optional[str] = None
    updated_at: Optional[datetime] = None
