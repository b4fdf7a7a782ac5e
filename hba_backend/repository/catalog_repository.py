"""Read-only hotel catalog backing search, pricing and room validation."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from hba_backend.domain.models import DestinationSuggestion, Hotel, RoomStatus, RoomType
from hba_backend.utils.logger import get_logger


logger = get_logger(__name__)


# room_types entries: (room_type_id, name, description, price, capacity)
_DEMO_HOTELS = [
    {
        "hotel_id": "hotel-1",
        "name": "Grand City Hotel",
        "description": (
            "A luxurious hotel in the heart of the city with stunning views and "
            "world-class amenities."
        ),
        "location": "New York, New York",
        "rating": 4.5,
        "price": 199,
        "amenities": ("Free WiFi", "Pool", "Gym", "Restaurant", "Bar", "Spa", "Room Service", "Concierge"),
        "room_types": (
            ("basic-room-1", "Standard Room", "Comfortable room with city view", 199, 2),
            ("luxury-room-1", "Luxury Suite", "Spacious suite with premium amenities", 399, 4),
        ),
    },
    {
        "hotel_id": "hotel-2",
        "name": "Seaside Resort & Spa",
        "description": "Beachfront resort featuring pristine beaches and world-class spa services.",
        "location": "Miami, Florida",
        "rating": 4.8,
        "price": 299,
        "amenities": ("Beachfront", "Free WiFi", "Pool", "Spa", "Restaurant", "Bar", "Water Sports", "Kids Club"),
        "room_types": (
            ("middle-room-1", "Ocean View Room", "Room with direct ocean views", 299, 3),
            ("luxury-room-2", "Presidential Suite", "Panoramic ocean views and butler service", 799, 6),
        ),
    },
    {
        "hotel_id": "hotel-3",
        "name": "Mountain Lodge Retreat",
        "description": "A cozy mountain retreat with rustic charm and breathtaking views.",
        "location": "Aspen, Colorado",
        "rating": 4.3,
        "price": 249,
        "amenities": ("Mountain Views", "Free WiFi", "Fireplace", "Restaurant", "Ski Storage", "Hot Tub", "Hiking Trails"),
        "room_types": (
            ("basic-room-2", "Mountain View Room", "Cozy room with mountain views", 249, 2),
        ),
    },
    {
        "hotel_id": "hotel-4",
        "name": "Metropolitan Business Center",
        "description": "Modern business hotel in the financial district.",
        "location": "Chicago, Illinois",
        "rating": 4.2,
        "price": 179,
        "amenities": ("Free WiFi", "Business Center", "Gym", "Restaurant", "Airport Shuttle", "Meeting Rooms", "Printer Access"),
        "room_types": (
            ("business-room-1", "Executive Room", "Work desk and city views", 179, 2),
            ("suite-room-1", "Executive Suite", "Separate living area and panoramic views", 329, 4),
        ),
    },
    {
        "hotel_id": "hotel-5",
        "name": "Tropical Paradise Resort",
        "description": "Luxury beachfront resort with volcanic mountain backdrops.",
        "location": "Maui, Hawaii",
        "rating": 4.7,
        "price": 449,
        "amenities": ("Beachfront", "Free WiFi", "Multiple Pools", "Spa", "Luau", "Snorkeling", "Golf Course", "Cultural Activities"),
        "room_types": (
            ("tropical-room-1", "Garden View Room", "Overlooking tropical gardens", 449, 3),
            ("oceanfront-suite-1", "Oceanfront Villa", "Direct beach access and private lanai", 899, 6),
        ),
    },
    {
        "hotel_id": "hotel-6",
        "name": "Bay View Boutique Hotel",
        "description": "Charming boutique hotel with personalized service and artistic design.",
        "location": "San Francisco, California",
        "rating": 4.1,
        "price": 229,
        "amenities": ("Free WiFi", "Rooftop Terrace", "Restaurant", "Art Gallery", "Pet-Friendly", "Bike Rental", "Wine Bar"),
        "room_types": (
            ("boutique-room-1", "Artist Room", "Local artwork and bay views", 229, 2),
            ("penthouse-1", "Penthouse Suite", "Panoramic bay and city views", 459, 4),
        ),
    },
    {
        "hotel_id": "hotel-7",
        "name": "Pacific Coastal Resort",
        "description": "Beachfront resort along the California coast.",
        "location": "Malibu, California",
        "rating": 4.6,
        "price": 379,
        "amenities": ("Beachfront", "Free WiFi", "Infinity Pool", "Spa", "Surfboard Rental", "Fine Dining", "Yoga Classes", "Private Beach"),
        "room_types": (
            ("ocean-room-1", "Ocean View Room", "Floor-to-ceiling windows over the Pacific", 379, 2),
            ("beachfront-suite-1", "Beachfront Suite", "Direct beach access and private patio", 679, 5),
        ),
    },
    {
        "hotel_id": "hotel-8",
        "name": "Vegas Strip Hotel & Casino",
        "description": "Gaming, entertainment and dining in the heart of the Strip.",
        "location": "Las Vegas, Nevada",
        "rating": 3.9,
        "price": 129,
        "amenities": ("Casino", "Free WiFi", "Pool", "Multiple Restaurants", "Entertainment Shows", "Shopping", "Parking"),
        "room_types": (
            ("vegas-room-1", "Strip View Room", "Modern room with Strip views", 129, 2),
            ("vegas-suite-1", "High Roller Suite", "Premium Strip views and VIP amenities", 299, 4),
        ),
    },
    {
        "hotel_id": "hotel-9",
        "name": "Emerald Coast Luxury Resort",
        "description": "Luxury resort with championship golf and white sand beaches.",
        "location": "Destin, Florida",
        "rating": 4.9,
        "price": 549,
        "amenities": ("Beachfront", "Championship Golf", "Luxury Spa", "Fine Dining", "Private Beach", "Butler Service", "Helicopter Tours", "Marina"),
        "room_types": (
            ("emerald-room-1", "Gulf View Room", "Stunning Gulf of Mexico views", 549, 3),
            ("presidential-1", "Presidential Villa", "Private beach, pool and dedicated staff", 1299, 8),
        ),
    },
    {
        "hotel_id": "hotel-10",
        "name": "Historic Harbor Hotel",
        "description": "Elegant historic hotel in the waterfront district.",
        "location": "Boston, Massachusetts",
        "rating": 4.0,
        "price": 219,
        "amenities": ("Historic Charm", "Free WiFi", "Restaurant", "Harbor Views", "Fitness Center", "Business Center", "Valet Parking"),
        "room_types": (
            ("historic-room-1", "Harbor View Room", "Historic details and harbor views", 219, 2),
            ("historic-suite-1", "Admiral Suite", "Panoramic harbor views and period furnishings", 419, 4),
        ),
    },
]

# (destination_id, name, country, popularity_score)
_POPULAR_DESTINATIONS = [
    ("new-york", "New York", "United States", 95),
    ("miami", "Miami", "United States", 88),
    ("las-vegas", "Las Vegas", "United States", 92),
    ("los-angeles", "Los Angeles", "United States", 90),
    ("chicago", "Chicago", "United States", 85),
    ("san-francisco", "San Francisco", "United States", 87),
    ("boston", "Boston", "United States", 83),
    ("seattle", "Seattle", "United States", 80),
    ("washington", "Washington DC", "United States", 86),
    ("aspen", "Aspen", "United States", 82),
    ("malibu", "Malibu", "United States", 78),
    ("destin", "Destin", "United States", 75),
    ("maui", "Maui", "United States", 89),
    ("california", "California", "United States", 94),
    ("florida", "Florida", "United States", 91),
    ("new-york-state", "New York State", "United States", 88),
    ("nevada", "Nevada", "United States", 84),
    ("hawaii", "Hawaii", "United States", 93),
    ("colorado", "Colorado", "United States", 79),
    ("massachusetts", "Massachusetts", "United States", 76),
    ("illinois", "Illinois", "United States", 77),
]


def _build_hotel(raw: dict) -> Hotel:
    return Hotel(
        hotel_id=raw["hotel_id"],
        name=raw["name"],
        description=raw["description"],
        location=raw["location"],
        rating=float(raw["rating"]),
        price=int(raw["price"]),
        amenities=tuple(raw["amenities"]),
        room_types=tuple(
            RoomType(
                room_type_id=room_type_id,
                name=name,
                description=description,
                price=int(price),
                capacity=int(capacity),
                status=RoomStatus.AVAILABLE,
            )
            for room_type_id, name, description, price, capacity in raw["room_types"]
        ),
    )


def demo_hotels() -> list[Hotel]:
    return [_build_hotel(raw) for raw in _DEMO_HOTELS]


class CatalogRepository:
    """Static hotel and room-type data; never mutated after construction."""

    def __init__(
        self,
        hotels: Optional[Iterable[Hotel]] = None,
        destinations: Optional[Sequence[DestinationSuggestion]] = None,
    ) -> None:
        hotel_list = list(hotels) if hotels is not None else demo_hotels()
        self._hotels: dict[str, Hotel] = {hotel.hotel_id: hotel for hotel in hotel_list}
        if destinations is None:
            destinations = [
                DestinationSuggestion(
                    destination_id=destination_id,
                    name=name,
                    country=country,
                    popularity_score=score,
                )
                for destination_id, name, country, score in _POPULAR_DESTINATIONS
            ]
        self._destinations = list(destinations)
        logger.info("Catalog loaded with %d hotels", len(self._hotels))

    def list_hotels(self) -> list[Hotel]:
        return list(self._hotels.values())

    def get_hotel(self, hotel_id: str) -> Optional[Hotel]:
        return self._hotels.get(hotel_id)

    def get_room_type(self, hotel_id: str, room_type_id: str) -> Optional[RoomType]:
        hotel = self._hotels.get(hotel_id)
        if hotel is None:
            return None
        return hotel.room_type(room_type_id)

    def room_exists(self, hotel_id: str, room_type_id: str) -> bool:
        return self.get_room_type(hotel_id, room_type_id) is not None

    def list_destinations(self) -> list[DestinationSuggestion]:
        return list(self._destinations)
