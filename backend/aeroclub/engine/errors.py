# backend/aeroclub/engine/errors.py


class EngineError(Exception):
    """Fault raised by the scheduling engine (never a validation verdict)."""


class MissingResourceError(EngineError):
    def __init__(self, what: str = "mission"):
        super().__init__(f"{what} has no aircraft (resource id) set")


class InvalidDurationError(EngineError):
    def __init__(self, mission, minimum):
        self.mission = mission
        self.minimum = minimum
        span = mission.scheduled_end - mission.scheduled_start
        label = f"mission {mission.id}" if getattr(mission, "id", None) is not None else "mission"
        super().__init__(
            f"{label} spans {span}, shorter than the {minimum} reserved for preparation and maintenance"
        )


class NoAvailabilityError(EngineError):
    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"No free start found after {attempts} attempts")
