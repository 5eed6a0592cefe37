"""Test helpers - deterministic random sources and state builders."""

from band_dynamics.core.state import BandChemistryState


class FixedRandom:
    """Random source that always returns the same draw."""

    def __init__(self, value: float):
        self.value = value

    def random(self) -> float:
        return self.value


class SequenceRandom:
    """Random source that returns the given draws in order."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    def random(self) -> float:
        value = self.values[self.calls]
        self.calls += 1
        return value


def make_state(chemistry=50, tension=50, alignment=50, conflict=50) -> BandChemistryState:
    return BandChemistryState(
        chemistry_level=chemistry,
        romantic_tension=tension,
        creative_alignment=alignment,
        conflict_index=conflict,
    )
