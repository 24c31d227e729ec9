"""
Environment record and clock.

Time of day and light level are pure functions of simulated time and are
re-derived every tick. Temperature, humidity, weather and season are
static in the core and only change through update_environment().
"""

import math
from dataclasses import dataclass, replace
from enum import Enum

from .constants import (
    ENVIRONMENT_DEFAULTS,
    LIGHT_LEVEL_BY_SLOT,
    TIME_SLOT_COUNT,
    TIME_SLOT_LENGTH,
)


class TimeOfDay(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"


class Weather(str, Enum):
    SUNNY = "sunny"
    CLOUDY = "cloudy"
    RAINY = "rainy"
    FOGGY = "foggy"


class Season(str, Enum):
    SPRING = "spring"
    SUMMER = "summer"
    AUTUMN = "autumn"
    WINTER = "winter"


TIME_OF_DAY_BY_SLOT = (
    TimeOfDay.MORNING,
    TimeOfDay.AFTERNOON,
    TimeOfDay.EVENING,
    TimeOfDay.NIGHT,
)


@dataclass
class Environment:
    """Process-wide environment record"""
    temperature: float = ENVIRONMENT_DEFAULTS['temperature']
    humidity: float = ENVIRONMENT_DEFAULTS['humidity']
    light_level: float = ENVIRONMENT_DEFAULTS['light_level']
    time_of_day: TimeOfDay = TimeOfDay.MORNING
    weather: Weather = Weather.SUNNY
    season: Season = Season.SPRING

    def __post_init__(self):
        self.time_of_day = TimeOfDay(self.time_of_day)
        self.weather = Weather(self.weather)
        self.season = Season(self.season)

    def to_dict(self) -> dict:
        return {
            'temperature': self.temperature,
            'humidity': self.humidity,
            'light_level': self.light_level,
            'time_of_day': self.time_of_day.value,
            'weather': self.weather.value,
            'season': self.season.value,
        }


def time_slot(sim_time: float) -> int:
    """
    Time-of-day slot for a simulated time.

    slot = floor((sim_time / TIME_SLOT_LENGTH) mod TIME_SLOT_COUNT)

    Returns:
        0 (morning), 1 (afternoon), 2 (evening) or 3 (night)
    """
    slot = int(math.floor((sim_time / TIME_SLOT_LENGTH) % TIME_SLOT_COUNT))
    # Float modulo can land exactly on the count for tiny negative inputs
    return min(slot, TIME_SLOT_COUNT - 1)


def light_level(sim_time: float) -> float:
    return LIGHT_LEVEL_BY_SLOT[time_slot(sim_time)]


def derive_environment(environment: Environment, sim_time: float) -> Environment:
    """Return a copy of environment with clock-driven fields for sim_time"""
    slot = time_slot(sim_time)
    return replace(
        environment,
        time_of_day=TIME_OF_DAY_BY_SLOT[slot],
        light_level=LIGHT_LEVEL_BY_SLOT[slot]
    )
