"""
Configuration settings for the virtual trader.
"""

from dataclasses import dataclass, asdict, field
from decimal import Decimal
from typing import Any, Dict, List, Optional
import json
import os

from ..core.models import Instrument
from ..market.prices import DEFAULT_INSTRUMENTS

ENV_PREFIX = "VIRTUAL_TRADER_"


@dataclass
class TraderConfig:
    """Settings for the trading engine and the price simulator"""
    # Accounts
    starting_balance: float = 100000.0

    # Price simulation
    tick_interval: float = 5.0
    drift_bias: float = 0.48
    volatility: float = 0.05
    price_floor: float = 0.01
    random_seed: Optional[int] = None

    # Risk labels
    moderate_risk_threshold: float = 0.10
    high_risk_threshold: float = 0.25

    # Concurrency
    lock_timeout: float = 5.0

    log_level: str = "INFO"

    # Seed instruments as {"symbol", "name", "sector", "price"} dicts; None = default set
    instruments: Optional[List[Dict[str, Any]]] = field(default=None)

    def __post_init__(self):
        if self.starting_balance < 0:
            raise ValueError("Starting balance cannot be negative")
        if self.tick_interval <= 0:
            raise ValueError("Tick interval must be positive")
        if self.lock_timeout <= 0:
            raise ValueError("Lock timeout must be positive")
        if self.price_floor <= 0:
            raise ValueError("Price floor must be positive")

    def build_instruments(self) -> List[Instrument]:
        """Instrument seed set described by this config"""
        if self.instruments is None:
            return list(DEFAULT_INSTRUMENTS)
        return [
            Instrument(
                symbol=item['symbol'],
                name=item.get('name', item['symbol']),
                sector=item.get('sector', ''),
                price=Decimal(str(item['price'])),
            )
            for item in self.instruments
        ]

    @classmethod
    def from_file(cls, config_path: str) -> 'TraderConfig':
        """Load configuration from JSON file"""
        try:
            with open(config_path, 'r') as f:
                data = json.load(f)
            return cls(**data)
        except (FileNotFoundError, json.JSONDecodeError, TypeError) as e:
            raise ValueError(f"Failed to load trader config from {config_path}: {e}")

    def save_to_file(self, config_path: str):
        """Save configuration to JSON file"""
        # Convert to dict, excluding None values
        config_dict = {
            k: v for k, v in asdict(self).items()
            if v is not None
        }

        with open(config_path, 'w') as f:
            json.dump(config_dict, f, indent=2)

    @classmethod
    def from_env(cls) -> 'TraderConfig':
        """Create configuration from environment variables, defaults for anything unset"""
        def env(name: str, default: Any, cast=float):
            value = os.getenv(ENV_PREFIX + name)
            if value is None or value == "":
                return default
            try:
                return cast(value)
            except ValueError:
                raise ValueError(f"Invalid value for {ENV_PREFIX + name}: {value!r}")

        defaults = cls()
        seed = env('RANDOM_SEED', None, int)
        return cls(
            starting_balance=env('STARTING_BALANCE', defaults.starting_balance),
            tick_interval=env('TICK_INTERVAL', defaults.tick_interval),
            drift_bias=env('DRIFT_BIAS', defaults.drift_bias),
            volatility=env('VOLATILITY', defaults.volatility),
            price_floor=env('PRICE_FLOOR', defaults.price_floor),
            random_seed=seed,
            moderate_risk_threshold=env('MODERATE_RISK_THRESHOLD', defaults.moderate_risk_threshold),
            high_risk_threshold=env('HIGH_RISK_THRESHOLD', defaults.high_risk_threshold),
            lock_timeout=env('LOCK_TIMEOUT', defaults.lock_timeout),
            log_level=env('LOG_LEVEL', defaults.log_level, str),
        )
