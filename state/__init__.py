from state.shared import ABSENT, SharedState

__all__ = ["ABSENT", "SharedState"]
