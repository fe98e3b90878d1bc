"""Question category taxonomy.

Category strings that are not listed here are still valid grouping keys for
the engine; the enum only names the eight topics of the written test.
"""
from enum import Enum


class QuestionCategory(Enum):
    TRAFFIC_SIGNS = "Traffic Signs"
    TRAFFIC_LAWS = "Traffic Laws"
    DEFENSIVE_DRIVING = "Defensive Driving"
    SHARING_THE_ROAD = "Sharing the Road"
    RIGHT_OF_WAY = "Right of Way"
    PARKING = "Parking"
    ALCOHOL_AND_DRUGS = "Alcohol & Drugs"
    SPECIAL_SITUATIONS = "Special Situations"


def all_display_names() -> list[str]:
    return [category.value for category in QuestionCategory]
