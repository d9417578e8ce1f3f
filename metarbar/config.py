import os
import logging
from typing import List
from dotenv import load_dotenv

load_dotenv()

METAR_API_URL = os.getenv("METAR_API_URL", "https://aviationweather.gov/api/data/metar")
AIRPORT_API_URL = os.getenv("AIRPORT_API_URL", "https://aviationweather.gov/api/data/airport")

HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))
REFRESH_INTERVAL_SECONDS = int(os.getenv("REFRESH_INTERVAL_SECONDS", "600"))  # 10 minutes

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def _split_codes(value: str) -> List[str]:
    return [code.strip().upper() for code in value.split(",") if code.strip()]


# Pacific Northwest airports tracked when the user has not picked any
DEFAULT_AIRPORTS = _split_codes(os.getenv(
    "DEFAULT_AIRPORTS",
    "KRNT,KBFI,KSEA,KOLM,KPWT,KPLU,KTIW,KSHN,KAWO,KBVS,KHQM,KPAE,KSPB,KAST,KCLS,KKLS,KPDX,KHIO",
))

DEFAULT_AIRPORT_STATES = _split_codes(os.getenv("DEFAULT_AIRPORT_STATES", "@WA,@OR,@ID"))


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
