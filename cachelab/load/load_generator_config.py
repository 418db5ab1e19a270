from pydantic import BaseModel, ConfigDict, StrictInt, field_validator, model_validator

from cachelab.env.time_parser import TimeParser


class LoadGeneratorConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    frequency: StrictInt = 1
    tick: float = 1.0
    min_frequency: StrictInt = 1
    max_frequency: StrictInt = 200

    @field_validator("tick", mode="before")
    @classmethod
    def parse_tick(cls, value: str | int | float) -> float:
        if isinstance(value, bool):
            raise ValueError("Err. - tick must be a number or time string")

        return TimeParser(value).time

    @field_validator("tick")
    @classmethod
    def check_tick(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("Err. - tick must be greater than zero")

        return value

    @model_validator(mode="after")
    def check_frequency_bounds(self):
        if self.min_frequency < 1:
            raise ValueError("Err. - min_frequency must be at least 1")

        if self.max_frequency < self.min_frequency:
            raise ValueError("Err. - max_frequency must not be below min_frequency")

        if not self.min_frequency <= self.frequency <= self.max_frequency:
            raise ValueError(
                f"Err. - frequency must be between {self.min_frequency} and {self.max_frequency}"
            )

        return self
