import os
from functools import lru_cache


class Settings:
    def __init__(
        self,
        timezone: str,
        default_investment_pct: float,
        generate_hour: int,
        generate_minute: int,
        safety_net_hours: int,
        log_level: str,
    ) -> None:
        self.timezone = timezone
        self.default_investment_pct = default_investment_pct
        self.generate_hour = generate_hour
        self.generate_minute = generate_minute
        self.safety_net_hours = safety_net_hours
        self.log_level = log_level


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    timezone = os.getenv("FINANCE_TIMEZONE", "Europe/Berlin")
    default_investment_pct = float(os.getenv("FINANCE_DEFAULT_INVESTMENT_PCT", "15"))
    generate_hour = int(os.getenv("FINANCE_GENERATE_HOUR", "3"))
    generate_minute = int(os.getenv("FINANCE_GENERATE_MINUTE", "15"))
    safety_net_hours = int(os.getenv("FINANCE_SAFETY_NET_HOURS", "1"))
    log_level = os.getenv("FINANCE_LOG_LEVEL", "INFO").upper()
    return Settings(
        timezone=timezone,
        default_investment_pct=default_investment_pct,
        generate_hour=generate_hour,
        generate_minute=generate_minute,
        safety_net_hours=safety_net_hours,
        log_level=log_level,
    )
