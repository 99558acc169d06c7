"""Default locations with their IMS names and UWYO sounding stations."""

from airsounds.config.schema import LocationConfig

BET_DAGAN = 40179

DEFAULT_LOCATIONS: list[LocationConfig] = [
    LocationConfig(
        name="megido",
        lat=32.597662,
        long=35.234076,
        alt=200,
        ims_name="AFULA NIR HAEMEQ",
        uwyo_station=BET_DAGAN,
    ),
    LocationConfig(
        name="sde-teiman",
        lat=31.287646,
        long=34.722855,
        alt=656,
        ims_name="BEER SHEVA",
        uwyo_station=BET_DAGAN,
    ),
    LocationConfig(
        name="zefat",
        lat=32.965719,
        long=35.497225,
        alt=2559,
        ims_name="ZEFAT HAR KENAAN",
        uwyo_station=BET_DAGAN,
    ),
    LocationConfig(
        name="bet-shaan",
        lat=32.102560,
        long=35.197610,
        alt=-394,
        ims_name="EDEN FARM",
        uwyo_station=BET_DAGAN,
    ),
]
