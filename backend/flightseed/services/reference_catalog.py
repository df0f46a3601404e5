"""
Catalog of reference airports and airlines for bootstrapping a store.

The Italian airports feed the window and fixed modes; the European hubs
are the endpoints of the popular-route table.

Only entries whose code is not already present are created; existing
records are never modified.
"""

import logging
from dataclasses import dataclass
from typing import List

from ..models import AirlineModel, AirportModel, CoordinatesModel
from ..store import FlightStore

logger = logging.getLogger(__name__)

REFERENCE_AIRPORTS: List[AirportModel] = [
    AirportModel(
        code="FCO", name="Leonardo da Vinci International Airport", city="Rome",
        country="Italy", timezone="Europe/Rome",
        coordinates=CoordinatesModel(latitude=41.8003, longitude=12.2389),
    ),
    AirportModel(
        code="MXP", name="Milan Malpensa Airport", city="Milan",
        country="Italy", timezone="Europe/Rome",
        coordinates=CoordinatesModel(latitude=45.6306, longitude=8.7281),
    ),
    AirportModel(
        code="LIN", name="Milan Linate Airport", city="Milan",
        country="Italy", timezone="Europe/Rome",
        coordinates=CoordinatesModel(latitude=45.4454, longitude=9.2767),
    ),
    AirportModel(
        code="NAP", name="Naples International Airport", city="Naples",
        country="Italy", timezone="Europe/Rome",
        coordinates=CoordinatesModel(latitude=40.8860, longitude=14.2908),
    ),
    AirportModel(
        code="VCE", name="Venice Marco Polo Airport", city="Venice",
        country="Italy", timezone="Europe/Rome",
        coordinates=CoordinatesModel(latitude=45.5053, longitude=12.3519),
    ),
    AirportModel(
        code="FLR", name="Florence Peretola Airport", city="Florence",
        country="Italy", timezone="Europe/Rome",
        coordinates=CoordinatesModel(latitude=43.8100, longitude=11.2051),
    ),
    AirportModel(
        code="CDG", name="Paris Charles de Gaulle Airport", city="Paris",
        country="France", timezone="Europe/Paris",
        coordinates=CoordinatesModel(latitude=49.0097, longitude=2.5479),
    ),
    AirportModel(
        code="LHR", name="London Heathrow Airport", city="London",
        country="United Kingdom", timezone="Europe/London",
        coordinates=CoordinatesModel(latitude=51.4700, longitude=-0.4543),
    ),
    AirportModel(
        code="FRA", name="Frankfurt Airport", city="Frankfurt",
        country="Germany", timezone="Europe/Berlin",
        coordinates=CoordinatesModel(latitude=50.0379, longitude=8.5622),
    ),
    AirportModel(
        code="MAD", name="Adolfo Suarez Madrid-Barajas Airport", city="Madrid",
        country="Spain", timezone="Europe/Madrid",
        coordinates=CoordinatesModel(latitude=40.4983, longitude=-3.5676),
    ),
    AirportModel(
        code="BCN", name="Barcelona-El Prat Airport", city="Barcelona",
        country="Spain", timezone="Europe/Madrid",
        coordinates=CoordinatesModel(latitude=41.2974, longitude=2.0833),
    ),
    AirportModel(
        code="AMS", name="Amsterdam Airport Schiphol", city="Amsterdam",
        country="Netherlands", timezone="Europe/Amsterdam",
        coordinates=CoordinatesModel(latitude=52.3105, longitude=4.7683),
    ),
    AirportModel(
        code="MUC", name="Munich Airport", city="Munich",
        country="Germany", timezone="Europe/Berlin",
        coordinates=CoordinatesModel(latitude=48.3538, longitude=11.7861),
    ),
    AirportModel(
        code="ZUR", name="Zurich Airport", city="Zurich",
        country="Switzerland", timezone="Europe/Zurich",
        coordinates=CoordinatesModel(latitude=47.4582, longitude=8.5555),
    ),
    AirportModel(
        code="VIE", name="Vienna International Airport", city="Vienna",
        country="Austria", timezone="Europe/Vienna",
        coordinates=CoordinatesModel(latitude=48.1103, longitude=16.5697),
    ),
    AirportModel(
        code="BRU", name="Brussels Airport", city="Brussels",
        country="Belgium", timezone="Europe/Brussels",
        coordinates=CoordinatesModel(latitude=50.9010, longitude=4.4856),
    ),
]

REFERENCE_AIRLINES: List[AirlineModel] = [
    AirlineModel(code="AZ", name="ITA Airways", country="Italy"),
    AirlineModel(code="LH", name="Lufthansa", country="Germany"),
    AirlineModel(code="AF", name="Air France", country="France"),
    AirlineModel(code="BA", name="British Airways", country="United Kingdom"),
    AirlineModel(code="KL", name="KLM", country="Netherlands"),
]


@dataclass
class ReferenceSeedResult:
    airports_created: int = 0
    airports_existing: int = 0
    airlines_created: int = 0
    airlines_existing: int = 0


def seed_reference_data(store: FlightStore,
                        airports: List[AirportModel] = REFERENCE_AIRPORTS,
                        airlines: List[AirlineModel] = REFERENCE_AIRLINES) -> ReferenceSeedResult:
    """Create catalog airports and airlines missing from a connected store."""
    result = ReferenceSeedResult()

    for airport in airports:
        if store.find_airport_by_code(airport.code) is None:
            store.save_airport(airport)
            result.airports_created += 1
            logger.info(f"Added airport: {airport.name} ({airport.code})")
        else:
            result.airports_existing += 1
            logger.debug(f"Airport {airport.code} already exists")

    for airline in airlines:
        if store.find_airline_by_code(airline.code) is None:
            store.save_airline(airline)
            result.airlines_created += 1
            logger.info(f"Added airline: {airline.name} ({airline.code})")
        else:
            result.airlines_existing += 1
            logger.debug(f"Airline {airline.code} already exists")

    return result
