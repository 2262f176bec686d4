import os

from pydantic import BaseModel

_DEFAULT_DEBOUNCE_MS = 300


class Settings(BaseModel):
    debounce_seconds: float = _DEFAULT_DEBOUNCE_MS / 1000
    omt_glob: str = "**/*.omt"
    config_glob: str = "**/tsconfig*.json"
    excluded_dirs: tuple[str, ...] = ("node_modules",)

    @classmethod
    def from_env(cls) -> "Settings":
        debounce_ms = int(os.getenv("OMT_DEBOUNCE_MS", str(_DEFAULT_DEBOUNCE_MS)))
        excluded = os.getenv("OMT_EXCLUDED_DIRS", "node_modules")
        return cls(
            debounce_seconds=debounce_ms / 1000,
            config_glob=os.getenv("OMT_CONFIG_GLOB", "**/tsconfig*.json"),
            excluded_dirs=tuple(part.strip() for part in excluded.split(",") if part.strip()),
        )

    def is_excluded(self, path: str) -> bool:
        parts = path.replace("\\", "/").split("/")
        return any(excluded in parts for excluded in self.excluded_dirs)
