class FixedRandom:
    """Источник случайности с заранее заданными значениями."""

    def __init__(self, value: float = 0.0, integer: int | None = None):
        self.value = value
        self.integer = integer

    def random(self) -> float:
        return self.value

    def randint(self, low: int, high: int) -> int:
        return self.integer if self.integer is not None else low
