"""
Process-wide runtime flags shared with the UI.
"""

from pydantic import BaseModel, ConfigDict

from openklaw.core.config import settings
from openklaw.stores.observable import ObservableStore


class AppState(BaseModel):
    model_config = ConfigDict(frozen=True)

    ollama_ready: bool = False
    current_model: str = settings.ollama.model


app_state: ObservableStore[AppState] = ObservableStore(AppState())


def set_ollama_ready(ready: bool) -> None:
    app_state.update(lambda s: s.model_copy(update={"ollama_ready": ready}))


def set_current_model(model: str) -> None:
    app_state.update(lambda s: s.model_copy(update={"current_model": model}))
