"""BMI calculation and category classification."""

from pydantic import BaseModel
from typing import Optional
from schemas.enums import BmiCategory
from schemas.user import UserData

CATEGORY_DESCRIPTIONS = {
    BmiCategory.UNDERWEIGHT: "Underweight",
    BmiCategory.NORMAL: "Healthy weight",
    BmiCategory.OVERWEIGHT: "Overweight",
    BmiCategory.OBESE: "Obesity",
}


class BmiResult(BaseModel):
    """Computed BMI with its category."""
    bmi: float
    category: BmiCategory

    @property
    def description(self) -> str:
        return CATEGORY_DESCRIPTIONS[self.category]


def calculate_bmi(weight: float, height: float) -> float:
    """BMI from weight in kg and height in cm."""
    height_m = height / 100
    return weight / (height_m * height_m)


def determine_category(bmi: float) -> BmiCategory:
    """Map a BMI value to its category."""
    if bmi < 18.5:
        return BmiCategory.UNDERWEIGHT
    if bmi < 25:
        return BmiCategory.NORMAL
    if bmi < 30:
        return BmiCategory.OVERWEIGHT
    return BmiCategory.OBESE


def classify(weight: Optional[float], height: Optional[float]) -> BmiResult:
    """Classify weight and height.

    Missing or non-positive inputs give a BMI of 0 in the normal category.
    """
    if not height or height <= 0 or not weight or weight <= 0:
        return BmiResult(bmi=0.0, category=BmiCategory.NORMAL)
    bmi = calculate_bmi(weight, height)
    return BmiResult(bmi=bmi, category=determine_category(bmi))


def classify_user(user: Optional[UserData]) -> BmiResult:
    """Classify a user from the latest weight entry and height."""
    if user is None or not user.weight_data:
        return BmiResult(bmi=0.0, category=BmiCategory.NORMAL)
    return classify(user.weight_data[-1], user.height)
