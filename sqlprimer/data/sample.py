"""Sample data: King County house sales plus two synthetic lookup tables."""

from __future__ import annotations

import random
from typing import Sequence, TypeVar

from sqlprimer.executor.environment import Environment
from sqlprimer.model.relation import Relation

T = TypeVar("T")

DEFAULT_SEED = 42

HOUSE_COLUMNS = [
    "id", "date", "price", "bedrooms", "bathrooms", "sqft_living", "sqft_lot",
    "floors", "waterfront", "view", "condition", "grade", "yr_built", "zipcode",
]

# A slice of the King County (WA) house sales dataset.
HOUSE_ROWS = [
    (7129300520, "20141013T000000", 221900.0, 3, 1.0, 1180, 5650, 1.0, 0, 0, 3, 7, 1955, 98178),
    (6414100192, "20141209T000000", 538000.0, 3, 2.25, 2570, 7242, 2.0, 0, 0, 3, 7, 1951, 98125),
    (5631500400, "20150225T000000", 180000.0, 2, 1.0, 770, 10000, 1.0, 0, 0, 3, 6, 1933, 98028),
    (2487200875, "20141209T000000", 604000.0, 4, 3.0, 1960, 5000, 1.0, 0, 0, 5, 7, 1965, 98136),
    (1954400510, "20150218T000000", 510000.0, 3, 2.0, 1680, 8080, 1.0, 0, 0, 3, 8, 1987, 98074),
    (7237550310, "20140512T000000", 1225000.0, 4, 4.5, 5420, 101930, 1.0, 0, 0, 3, 11, 2001, 98053),
    (1321400060, "20140627T000000", 257500.0, 3, 2.25, 1715, 6819, 2.0, 0, 0, 3, 7, 1995, 98003),
    (2008000270, "20150115T000000", 291850.0, 3, 1.5, 1060, 9711, 1.0, 0, 0, 3, 7, 1963, 98198),
    (2414600126, "20150415T000000", 229500.0, 3, 1.0, 1780, 7470, 1.0, 0, 0, 3, 7, 1960, 98146),
    (3793500160, "20150312T000000", 323000.0, 3, 2.5, 1890, 6560, 2.0, 0, 0, 3, 7, 2003, 98038),
    (1736800520, "20150403T000000", 662500.0, 3, 2.5, 3560, 9796, 1.0, 0, 0, 3, 8, 1965, 98007),
    (9212900260, "20140527T000000", 468000.0, 2, 1.0, 1160, 6000, 1.0, 0, 0, 4, 7, 1942, 98115),
    (114101516, "20140528T000000", 310000.0, 3, 1.0, 1430, 19901, 1.5, 0, 0, 4, 7, 1927, 98028),
    (6054650070, "20141007T000000", 400000.0, 3, 1.75, 1370, 9680, 1.0, 0, 0, 4, 7, 1977, 98074),
    (1175000570, "20150312T000000", 530000.0, 5, 2.0, 1810, 4850, 1.5, 0, 0, 3, 7, 1900, 98107),
    (9297300055, "20150124T000000", 650000.0, 4, 3.0, 2950, 5000, 2.0, 0, 3, 3, 9, 1979, 98126),
    (1875500060, "20140731T000000", 395000.0, 3, 2.0, 1890, 14040, 2.0, 0, 0, 3, 7, 1994, 98019),
    (6865200140, "20140529T000000", 485000.0, 4, 1.0, 1600, 4300, 1.5, 0, 0, 4, 7, 1916, 98103),
    (16000397, "20141205T000000", 189000.0, 2, 1.0, 1200, 9850, 1.0, 0, 0, 4, 7, 1921, 98002),
    (7983200060, "20150424T000000", 230000.0, 3, 1.0, 1250, 9774, 1.0, 0, 0, 4, 7, 1969, 98003),
]

OWNER_NAMES = [
    "Alice", "Bob", "Carol", "Dave", "Eve", "Frank", "Grace", "Heidi",
]

REGIONS = ["North", "South", "East", "West"]


def houses() -> Relation:
    """Return the bundled house sales sample."""
    return Relation.from_records(
        [dict(zip(HOUSE_COLUMNS, row)) for row in HOUSE_ROWS], HOUSE_COLUMNS
    )


def sample_with_replacement(
    source: Sequence[T], size: int, rng: random.Random
) -> list[T]:
    """Draw *size* values from *source*, with replacement."""
    if not source and size:
        raise ValueError("Cannot sample from an empty source")
    return rng.choices(source, k=size)


def auxiliary_tables(
    house_rel: Relation, *, seed: int = DEFAULT_SEED
) -> dict[str, Relation]:
    """Generate the ``owners`` and ``neighborhoods`` tables for *house_rel*.

    owners(id, owner): about half of the house ids, each once, with an owner
    name drawn with replacement from OWNER_NAMES. Houses without an owner row
    show up as nulls in a left join.

    neighborhoods(zipcode, region): every distinct zipcode of *house_rel*
    with a region drawn with replacement from REGIONS.
    """
    rng = random.Random(seed)

    ids = sorted({i for i in house_rel.column("id") if i is not None})
    owned = sorted(rng.sample(ids, len(ids) // 2))
    owners = Relation.from_columns(
        {"id": owned, "owner": sample_with_replacement(OWNER_NAMES, len(owned), rng)}
    )

    zipcodes = sorted({z for z in house_rel.column("zipcode") if z is not None})
    neighborhoods = Relation.from_columns(
        {
            "zipcode": zipcodes,
            "region": sample_with_replacement(REGIONS, len(zipcodes), rng),
        }
    )
    return {"owners": owners, "neighborhoods": neighborhoods}


def load_sample_data(
    env: Environment,
    house_rel: Relation | None = None,
    *,
    seed: int = DEFAULT_SEED,
) -> None:
    """Bind houses, owners and neighborhoods into the environment."""
    if house_rel is None:
        house_rel = houses()
    env.bind("houses", house_rel)
    for name, rel in auxiliary_tables(house_rel, seed=seed).items():
        env.bind(name, rel)
