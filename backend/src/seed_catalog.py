"""Static seed corpus used by the in-memory fallback tiers.

Records are kept as raw field mappings and turned into fresh model instances
on every read, so callers may mutate what they get back without affecting the
next resolution cycle.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from models import Event, MarketplaceListing, Recommendation

Record = Mapping[str, Any]


YOGA_FITNESS: Tuple[Record, ...] = (
    {
        "id": "yoga1",
        "name": "Serenity Yoga Studio",
        "category": "fitness",
        "tags": ["Yoga", "Beginners", "Meditation"],
        "rating": 4.8,
        "address": "123 Zen Street, Indiranagar, Bangalore",
        "distance": "0.6 miles away",
        "image": "https://images.unsplash.com/photo-1570655652364-2e0a67455ac6",
        "images": ["https://images.unsplash.com/photo-1570655652364-2e0a67455ac6"],
        "description": "Peaceful yoga studio offering classes for all levels with focus on proper alignment and mindful practice.",
        "phone": "+919876543230",
        "open_now": True,
        "hours": "Until 9:00 PM",
        "price_level": "$$",
        "review_count": 89,
    },
    {
        "id": "yoga2",
        "name": "Namaste Yoga Center",
        "category": "fitness",
        "tags": ["Yoga", "Hatha", "Vinyasa"],
        "rating": 4.7,
        "address": "456 Harmony Road, Koramangala, Bangalore",
        "distance": "1.2 miles away",
        "image": "https://images.unsplash.com/photo-1588286840104-8957b019727f",
        "images": ["https://images.unsplash.com/photo-1588286840104-8957b019727f"],
        "description": "Traditional yoga center offering Hatha and Vinyasa classes with experienced instructors in a calming environment.",
        "phone": "+919876543231",
        "open_now": True,
        "hours": "Until 8:30 PM",
        "price_level": "$$",
        "review_count": 67,
    },
    {
        "id": "yoga3",
        "name": "Flow Yoga & Wellness",
        "category": "fitness",
        "tags": ["Yoga", "Beginners", "Workshops"],
        "rating": 4.9,
        "address": "789 Peaceful Lane, Jayanagar, Bangalore",
        "distance": "0.8 miles away",
        "image": "https://images.unsplash.com/photo-1599447421416-3414500d18a5",
        "images": ["https://images.unsplash.com/photo-1599447421416-3414500d18a5"],
        "description": "Wellness-focused yoga studio with special workshops for beginners and programs for stress relief and flexibility.",
        "phone": "+919876543232",
        "open_now": False,
        "hours": "Opens tomorrow at 6:00 AM",
        "price_level": "$$$",
        "review_count": 102,
    },
)

MOCK_CORPUS: Tuple[Record, ...] = (
    {
        "id": "1",
        "name": "Chic Cuts & Styles",
        "category": "salons",
        "tags": ["Unisex", "Trendy", "Walk-ins"],
        "rating": 4.8,
        "address": "123 Style Avenue, Indiranagar, Bangalore",
        "distance": "0.5 miles away",
        "phone": "+919876543210",
        "image": "https://images.unsplash.com/photo-1560066984-138dadb4c035",
        "description": "Modern unisex salon offering premium haircuts, styling, and coloring services in a relaxed atmosphere.",
        "open_now": True,
        "hours": "Until 8:00 PM",
        "price_level": "$$",
    },
    {
        "id": "2",
        "name": "Harmony Hair Studio",
        "category": "salons",
        "tags": ["Unisex", "Organic", "Appointment"],
        "rating": 4.6,
        "address": "456 Beauty Lane, Malleshwaram, Bangalore",
        "distance": "0.8 miles away",
        "phone": "+919876543211",
        "image": "https://images.unsplash.com/photo-1470259078422-826894b933aa",
        "description": "Eco-friendly salon focusing on sustainable beauty practices and personalized haircare treatments.",
        "open_now": True,
        "hours": "Until 7:00 PM",
        "price_level": "$$$",
    },
    {
        "id": "3",
        "name": "Urban Mane",
        "category": "salons",
        "tags": ["Unisex", "Boutique", "Trending"],
        "rating": 4.5,
        "address": "789 Fashion Street, Koramangala, Bangalore",
        "distance": "1.2 miles away",
        "phone": "+919876543212",
        "image": "https://images.unsplash.com/photo-1532710093739-9470acff878f",
        "description": "Boutique salon specializing in contemporary cuts and styles for all genders in an upscale environment.",
        "open_now": False,
        "hours": "Opens tomorrow at 9:00 AM",
        "price_level": "$$",
    },
    {
        "id": "4",
        "name": "Craft Coffee House",
        "category": "cafes",
        "tags": ["Specialty Coffee", "Pastries", "Wifi"],
        "rating": 4.7,
        "address": "321 Brew Street, Indiranagar, Bangalore",
        "distance": "0.3 miles away",
        "phone": "+919876543213",
        "image": "https://images.unsplash.com/photo-1501339847302-ac426a4a7cbb",
        "description": "Artisanal coffee shop serving single-origin espresso drinks and house-made pastries in a cozy atmosphere.",
        "open_now": True,
        "hours": "Until 6:00 PM",
        "price_level": "$$",
    },
    {
        "id": "5",
        "name": "Fusion Restaurant",
        "category": "restaurants",
        "tags": ["Asian Fusion", "Dinner", "Cocktails"],
        "rating": 4.4,
        "address": "567 Flavor Road, Jayanagar, Bangalore",
        "distance": "1.5 miles away",
        "phone": "+919876543214",
        "image": "https://images.unsplash.com/photo-1555396273-367ea4eb4db5",
        "description": "Creative restaurant blending Asian and Western flavors with an extensive craft cocktail menu.",
        "open_now": True,
        "hours": "Until 10:00 PM",
        "price_level": "$$$",
    },
    {
        "id": "6",
        "name": "Elite Barber Shop",
        "category": "salons",
        "tags": ["Men", "Traditional", "Premium"],
        "rating": 4.9,
        "address": "890 Classic Avenue, Whitefield, Bangalore",
        "distance": "2.0 miles away",
        "phone": "+919876543215",
        "image": "https://images.unsplash.com/photo-1503951914875-452162b0f3f1",
        "description": "Traditional barbershop offering classic men's cuts, hot towel shaves, and grooming services.",
        "open_now": False,
        "hours": "Opens tomorrow at 10:00 AM",
        "price_level": "$$",
    },
    {
        "id": "7",
        "name": "Wellness Spa & Salon",
        "category": "health",
        "tags": ["Unisex", "Spa", "Haircare"],
        "rating": 4.7,
        "address": "654 Relaxation Road, Richmond Town, Bangalore",
        "distance": "1.7 miles away",
        "phone": "+919876543216",
        "image": "https://images.unsplash.com/photo-1600334129128-685c5582fd35",
        "description": "Comprehensive wellness center combining salon services with spa treatments for a complete self-care experience.",
        "open_now": True,
        "hours": "Until 9:00 PM",
        "price_level": "$$$",
    },
    {
        "id": "8",
        "name": "Melodious Flute Academy",
        "category": "music",
        "tags": ["Flute", "Beginner-Friendly", "Classical"],
        "rating": 4.9,
        "address": "123 Music Lane, Nagarbhavi, Bangalore",
        "distance": "0.3 miles away",
        "phone": "+919876543217",
        "image": "https://images.unsplash.com/photo-1520523839897-bd0b52f945a0",
        "description": "Premier flute learning center with highly qualified teachers offering personalized lessons for all age groups and skill levels.",
        "open_now": True,
        "hours": "Until 8:00 PM",
        "price_level": "$$",
    },
    {
        "id": "9",
        "name": "Malleshwaram Music School",
        "category": "music",
        "tags": ["Flute", "All Instruments", "Workshops"],
        "rating": 4.7,
        "address": "456 Harmony Road, Malleshwaram, Bangalore",
        "distance": "0.7 miles away",
        "phone": "+919876543218",
        "image": "https://images.unsplash.com/photo-1513883049090-d0b7439799bf",
        "description": "Comprehensive music school offering flute lessons along with various other instruments. Regular workshops and recitals for students.",
        "open_now": True,
        "hours": "Until 7:30 PM",
        "price_level": "$$",
    },
    {
        "id": "10",
        "name": "Classical Flute Guru",
        "category": "music",
        "tags": ["Flute", "Carnatic", "Private Lessons"],
        "rating": 4.8,
        "address": "789 Raaga Street, Nagarbhavi, Bangalore",
        "distance": "1.2 miles away",
        "phone": "+919876543219",
        "image": "https://images.unsplash.com/photo-1527864550417-7fd91fc51a46",
        "description": "Specialized in Carnatic flute teaching with an experienced guru who has performed internationally. One-on-one personalized lessons.",
        "open_now": False,
        "hours": "Opens tomorrow at 9:00 AM",
        "price_level": "$$$",
    },
)

SAMPLE_EVENTS: Tuple[Record, ...] = (
    {
        "id": "event1",
        "title": "Summer Food Festival",
        "date": "July 15, 2023",
        "time": "11:00 AM - 8:00 PM",
        "location": "Cubbon Park, Bangalore",
        "description": "A culinary celebration featuring over 30 local restaurants, live cooking demonstrations, and music performances.",
        "image": "https://images.unsplash.com/photo-1555939594-58d7cb561ad1",
        "attendees": 215,
    },
    {
        "id": "event2",
        "title": "Weekend Art Exhibition",
        "date": "July 22-23, 2023",
        "time": "10:00 AM - 6:00 PM",
        "location": "Modern Art Gallery, Indiranagar",
        "description": "Showcasing works from emerging local artists with interactive sessions and workshops throughout the weekend.",
        "image": "https://images.unsplash.com/photo-1591115765373-5207764f72e4",
        "attendees": 98,
    },
    {
        "id": "event3",
        "title": "Wellness & Yoga Retreat",
        "date": "August 5, 2023",
        "time": "7:00 AM - 4:00 PM",
        "location": "Sunset Lawn, Koramangala",
        "description": "A day-long retreat with yoga sessions, meditation workshops, and healthy living seminars led by certified instructors.",
        "image": "https://images.unsplash.com/photo-1599901860904-17e6ed7083a0",
        "attendees": 42,
    },
    {
        "id": "event4",
        "title": "Yoga for Beginners Workshop",
        "date": "August 20, 2023",
        "time": "9:00 AM - 12:00 PM",
        "location": "Serenity Yoga Studio, Indiranagar",
        "description": "A beginner-friendly workshop introducing fundamental yoga poses, breathing techniques, and mindfulness practices for newcomers.",
        "image": "https://images.unsplash.com/photo-1599447421416-3414500d18a5",
        "attendees": 32,
    },
    {
        "id": "event5",
        "title": "Community Festival",
        "date": "2025-06-15",
        "time": "10:00 AM - 6:00 PM",
        "location": "Central Park, Indiranagar",
        "description": "Annual community festival with food stalls, games, and live performances.",
        "image": "https://images.unsplash.com/photo-1533174072545-7a4b6ad7a6c3",
        "attendees": 120,
    },
    {
        "id": "event6",
        "title": "Weekend Food Fair",
        "date": "2025-05-28",
        "time": "11:00 AM - 9:00 PM",
        "location": "Food Street, Koramangala",
        "description": "Explore local cuisine with special stalls featuring masala puri, badam milk and other local delicacies",
        "image": "https://images.unsplash.com/photo-1555939594-58d7cb561ad1",
        "attendees": 85,
    },
)

SAMPLE_LISTINGS: Tuple[Record, ...] = (
    {
        "id": "listing1",
        "title": "Yamaha Acoustic Guitar",
        "description": "Lightly used F310 acoustic guitar with gig bag and a spare set of strings.",
        "price": 6500,
        "category": "Musical Instruments",
        "condition": "Used - Like New",
        "seller_name": "Arjun Rao",
        "seller_rating": 4.6,
        "location": "Indiranagar, Bangalore",
        "tags": ["Guitar", "Acoustic", "Music"],
        "review_count": 12,
        "created_at": "2024-05-02",
    },
    {
        "id": "listing2",
        "title": "Bamboo Bansuri Flute",
        "description": "Handcrafted C natural bansuri, ideal for beginners learning Hindustani classical.",
        "price": 1200,
        "category": "Musical Instruments",
        "condition": "New",
        "seller_name": "Malleshwaram Music Store",
        "seller_rating": 4.8,
        "location": "Malleshwaram, Bangalore",
        "tags": ["Flute", "Bansuri", "Beginner"],
        "review_count": 31,
        "created_at": "2024-05-10",
    },
    {
        "id": "listing3",
        "title": "Yoga Mat and Blocks Set",
        "description": "6mm non-slip yoga mat with two foam blocks and a cotton strap.",
        "price": 1500,
        "category": "Fitness",
        "condition": "Used - Good",
        "seller_name": "Priya S",
        "seller_rating": 4.4,
        "location": "Koramangala, Bangalore",
        "tags": ["Yoga", "Fitness"],
        "review_count": 5,
        "created_at": "2024-04-21",
    },
    {
        "id": "listing4",
        "title": "Home Espresso Machine",
        "description": "Compact espresso machine with milk frother, two years old and recently serviced.",
        "price": 9000,
        "category": "Home Appliances",
        "condition": "Used - Good",
        "seller_name": "Karthik M",
        "seller_rating": 4.2,
        "location": "HSR Layout, Bangalore",
        "tags": ["Coffee", "Kitchen"],
        "review_count": 3,
        "created_at": "2024-03-30",
    },
    {
        "id": "listing5",
        "title": "Study Desk with Bookshelf",
        "description": "Solid wood study desk with an attached bookshelf, good for students.",
        "price": 4000,
        "category": "Furniture",
        "condition": "Used - Fair",
        "seller_name": "Neha Kapoor",
        "seller_rating": 4.5,
        "location": "Jayanagar, Bangalore",
        "tags": ["Furniture", "Study"],
        "review_count": 8,
        "created_at": "2024-05-05",
    },
)


def _music_teachers() -> Tuple[Record, ...]:
    return tuple(r for r in MOCK_CORPUS if r["category"] == "music")


@dataclass
class SeedCatalog:
    """Curated datasets, the generic mock corpus and the static event and listing corpora."""

    datasets: Dict[str, Sequence[Record]] = field(default_factory=dict)
    corpus: Sequence[Record] = ()
    events: Sequence[Record] = ()
    listings: Sequence[Record] = ()

    @classmethod
    def default(cls) -> "SeedCatalog":
        return cls(
            datasets={
                "yoga_fitness": YOGA_FITNESS,
                "music_teachers": _music_teachers(),
            },
            corpus=MOCK_CORPUS,
            events=SAMPLE_EVENTS,
            listings=SAMPLE_LISTINGS,
        )

    @classmethod
    def empty(cls) -> "SeedCatalog":
        return cls()

    def dataset(self, name: str) -> List[Recommendation]:
        return [_recommendation(r) for r in self.datasets.get(name, ())]

    def recommendations(self) -> List[Recommendation]:
        return [_recommendation(r) for r in self.corpus]

    def event_list(self) -> List[Event]:
        return [Event(**dict(r)) for r in self.events]

    def listing_list(self) -> List[MarketplaceListing]:
        return [_listing(r) for r in self.listings]


def _recommendation(record: Record) -> Recommendation:
    data = dict(record)
    data["tags"] = list(data.get("tags") or [])
    data["images"] = list(data.get("images") or [])
    return Recommendation(**data)


def _listing(record: Record) -> MarketplaceListing:
    data = dict(record)
    data["tags"] = list(data.get("tags") or [])
    data["images"] = list(data.get("images") or [])
    return MarketplaceListing(**data)
