# chessmate/config.py
from dataclasses import dataclass, field
from typing import Dict
import os
import tomllib  # python >=3.11

# Defaults (centipawns)
PIECE_VALUES = {
    "PAWN": 100,
    "KNIGHT": 320,
    "BISHOP": 330,
    "ROOK": 500,
    "QUEEN": 900,
    "KING": 20000,
}

@dataclass
class SearchConfig:
    depth: int = 3  # depth 3 plays at beginner-intermediate strength
    align_leaf_side: bool = True  # adjust root depth so the last ply searched is Black's

@dataclass
class EvalConfig:
    piece_values: Dict[str, int] = field(default_factory=lambda: PIECE_VALUES.copy())

@dataclass
class UIConfig:
    engine_name: str = "ChessMate"
    human_side: str = "white"

@dataclass
class Config:
    search: SearchConfig = field(default_factory=SearchConfig)
    eval: EvalConfig = field(default_factory=EvalConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    log_level: str = "INFO"

    @staticmethod
    def load_from_toml(path: str = "config.toml") -> "Config":
        cfg = Config()
        if not os.path.exists(path):
            return cfg
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        for section in ("search", "eval", "ui"):
            target = getattr(cfg, section)
            for k, v in raw.get(section, {}).items():
                if hasattr(target, k):
                    setattr(target, k, v)
        if "log_level" in raw:
            cfg.log_level = str(raw["log_level"]).upper()
        # partial piece tables only override the pieces they name
        if "piece_values" in raw.get("eval", {}):
            merged = PIECE_VALUES.copy()
            merged.update({k.upper(): v for k, v in raw["eval"]["piece_values"].items()})
            cfg.eval.piece_values = merged
        cfg.validate()
        return cfg

    def validate(self) -> None:
        if not isinstance(self.search.depth, int) or isinstance(self.search.depth, bool):
            raise ValueError(f"search depth must be an integer, got {self.search.depth!r}")
        if self.search.depth < 1:
            raise ValueError(f"search depth must be >= 1, got {self.search.depth}")
        if self.ui.human_side not in ("white", "black"):
            raise ValueError(f"human_side must be 'white' or 'black', got {self.ui.human_side!r}")


def load_config() -> Config:
    """Load the config file named by the environment, then apply env overrides."""
    cfg = Config.load_from_toml(os.environ.get("CHESSMATE_CONFIG_TOML", "config.toml"))
    # allow env override of depth for quick debugging
    override_depth = os.environ.get("CHESSMATE_SEARCH_DEPTH")
    if override_depth:
        try:
            cfg.search.depth = int(override_depth)
        except ValueError:
            raise ValueError(f"CHESSMATE_SEARCH_DEPTH must be an integer, got {override_depth!r}") from None
        cfg.validate()
    return cfg


# single globally importable config instance
CONFIG = load_config()
