"""Test data builders shared across test modules."""

import csv

CITIES = ("NYC", "SF", "LA")

GEOJSON = {
    "type": "FeatureCollection",
    "features": [
        {
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": [-122.4, 37.8]},
            "properties": {"name": "SF", "pop": 808000},
        },
        {
            "type": "Feature",
            "geometry": {
                "type": "LineString",
                "coordinates": [[-74.0, 40.7], [-118.2, 34.0]],
            },
            "properties": {"name": "route", "lanes": 4},
        },
        {
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": [2.35, 48.85]},
            "properties": {"name": "Paris"},
        },
    ],
}


def make_people(n=120):
    """Rows of (id, name, age, city); every tenth city is null."""
    rows = []
    for i in range(1, n + 1):
        city = None if i % 10 == 0 else CITIES[i % 3]
        rows.append((i, f"user{i}", 20 + i % 50, city))
    return rows


def write_csv(path, header, rows):
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for row in rows:
            writer.writerow(["" if v is None else v for v in row])
    return path
