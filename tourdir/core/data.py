import datetime
import logging
from typing import Optional

from tourdir.core.directory import DirectoryService
from tourdir.core.itinerary import ItineraryManager
from tourdir.models.domain import (
    BusinessCreate,
    CategoryCreate,
    DayCreate,
    ItemCreate,
    ItineraryCreate,
    UserCreate,
)

logger = logging.getLogger("tourdir.seed")

SEED_USER = {
    "username": "testuser",
    "email": "test@example.com",
    "password": "password",
    "full_name": "Test User",
    "is_business": False,
}

SEED_CATEGORIES = [
    {"name": "Accommodation", "icon": "bed"},
    {"name": "Dining", "icon": "utensils"},
    {"name": "Attractions", "icon": "camera"},
    {"name": "Shopping", "icon": "shopping-bag"},
    {"name": "Transportation", "icon": "car"},
    {"name": "Tours", "icon": "map"},
]

# category is the index into SEED_CATEGORIES; price_level unit depends on it
SEED_BUSINESSES = [
    {
        "name": "Victoria Falls Hotel",
        "description": "Historic 5-star hotel with stunning views of Victoria Falls",
        "address": "1 Mallet Drive, Victoria Falls",
        "city": "Victoria Falls",
        "latitude": -17.9326,
        "longitude": 25.8308,
        "category": 0,
        "rating": 4.8,
        "price_level": 350,
        "tags": ["5-star hotel", "Luxury", "Restaurant"],
        "amenities": ["WiFi", "Pool", "Restaurant", "Bar", "Air Conditioning"],
    },
    {
        "name": "Bulawayo Boutique Hotel",
        "description": "Charming boutique hotel in the heart of Bulawayo",
        "address": "23 Cecil Avenue, Bulawayo",
        "city": "Bulawayo",
        "latitude": -20.1225,
        "longitude": 28.6314,
        "category": 0,
        "rating": 4.5,
        "price_level": 180,
        "tags": ["Boutique", "Central", "Comfortable"],
        "amenities": ["WiFi", "Breakfast", "Air Conditioning", "Laundry"],
    },
    {
        "name": "Boma Restaurant",
        "description": "Traditional dinner with drumming and local dishes",
        "city": "Harare",
        "latitude": -17.8252,
        "longitude": 31.0335,
        "category": 1,
        "rating": 4.6,
        "price_level": 45,
        "tags": ["Authentic", "Traditional", "Live Music"],
        "amenities": ["Live Music", "Outdoor Seating", "Private Dining", "Bar"],
    },
    {
        "name": "Zambezi House",
        "description": "Riverside restaurant with sunset views over the Zambezi",
        "city": "Victoria Falls",
        "latitude": -17.9256,
        "longitude": 25.8367,
        "category": 1,
        "rating": 4.7,
        "price_level": 60,
        "tags": ["International", "Riverside", "Sunset Views"],
        "amenities": ["Outdoor Seating", "Bar", "Vegetarian Options", "Reservations"],
    },
    {
        "name": "Indaba Cafe",
        "description": "Coffee, brunch and pastries",
        "city": "Harare",
        "latitude": -17.8282,
        "longitude": 31.0426,
        "category": 1,
        "rating": 4.5,
        "price_level": 15,
        "tags": ["Coffee", "Brunch", "Pastries", "Wheelchair Accessible"],
        "amenities": ["WiFi", "Takeaway", "Outdoor Seating", "Vegan Options"],
    },
    {
        "name": "Great Zimbabwe Ruins",
        "description": "Ruins of the medieval city, a UNESCO World Heritage Site",
        "city": "Masvingo",
        "latitude": -20.2852,
        "longitude": 30.9344,
        "category": 2,
        "rating": 4.7,
        "price_level": 20,
        "tags": ["Historical", "Cultural", "Guided Tours"],
        "amenities": ["Guided Tours", "Parking", "Souvenir Shop"],
    },
    {
        "name": "National Gallery of Zimbabwe",
        "description": "Contemporary and traditional African art",
        "city": "Harare",
        "latitude": -17.8308,
        "longitude": 31.0410,
        "category": 2,
        "rating": 4.3,
        "price_level": 12,
        "tags": ["Art", "Cultural", "Museum", "Wheelchair Accessible"],
        "amenities": ["Guided Tours", "Gift Shop", "Cafe"],
    },
    {
        "name": "Mbare Market",
        "description": "Busy local market for crafts, produce and fabrics",
        "city": "Harare",
        "latitude": -17.8583,
        "longitude": 31.0389,
        "category": 3,
        "rating": 4.2,
        "price_level": 0,
        "tags": ["Local Market", "Crafts", "Authentic"],
        "amenities": ["Local Guides", "Bargaining"],
    },
    {
        "name": "Safari Transit",
        "description": "Airport transfers and scheduled shuttles around Victoria Falls",
        "city": "Victoria Falls",
        "latitude": -17.9315,
        "longitude": 25.8307,
        "category": 4,
        "rating": 4.4,
        "price_level": 35,
        "tags": ["Shuttle", "Tours", "Airport Transfer"],
        "amenities": ["Air Conditioning", "WiFi", "Bottled Water", "Scheduled Routes"],
    },
    {
        "name": "Wild Horizons Safaris",
        "description": "Guided game drives in Hwange National Park",
        "city": "Hwange",
        "latitude": -18.3631,
        "longitude": 26.4898,
        "category": 5,
        "rating": 4.8,
        "price_level": 150,
        "tags": ["Safari", "Wildlife", "Guided Tours"],
        "amenities": ["Game Drives", "Lunch Included", "Hotel Pickup"],
    },
]


def seed_store(
    directory: DirectoryService,
    planner: ItineraryManager,
    today: Optional[datetime.date] = None,
) -> bool:
    """
    Loads the sample catalog into an empty store.
    Returns False without touching anything when businesses already exist.
    """
    if directory.repo.list_businesses():
        logger.info("Store already has businesses, skipping seed.")
        return False

    user = directory.repo.get_user_by_email(SEED_USER["email"])
    if user is None:
        user = directory.create_user(UserCreate(**SEED_USER))

    categories = directory.list_categories()
    if not categories:
        categories = [
            directory.create_category(CategoryCreate(**c)) for c in SEED_CATEGORIES
        ]

    businesses = []
    for entry in SEED_BUSINESSES:
        fields = dict(entry)
        category = categories[fields.pop("category") % len(categories)]
        businesses.append(
            directory.create_business(BusinessCreate(category_id=category.id, **fields))
        )

    today = today or datetime.date.today()
    itinerary = planner.create_itinerary(
        ItineraryCreate(
            user_id=user.id,
            title="Zimbabwe Highlights",
            description="Victoria Falls and the Great Zimbabwe ruins",
            start_date=today,
            end_date=today + datetime.timedelta(days=2),
            is_public=True,
            total_budget=1500,
        )
    )
    day1 = planner.create_day(
        itinerary.id, DayCreate(date=today, notes="Arrival and the falls")
    )
    day2 = planner.create_day(
        itinerary.id,
        DayCreate(date=today + datetime.timedelta(days=1), notes="Exploring the ancient ruins"),
    )
    planner.create_item(
        day1.id,
        ItemCreate(
            business_id=businesses[0].id,
            type="activity",
            title="Victoria Falls Tour",
            description="Tour of the falls with a local guide",
            start_time=datetime.time(9, 0),
            end_time=datetime.time(12, 0),
            cost=50,
        ),
    )
    planner.create_item(
        day1.id,
        ItemCreate(
            business_id=businesses[3].id,
            type="activity",
            title="Dinner at Zambezi House",
            start_time=datetime.time(18, 30),
            end_time=datetime.time(20, 30),
            cost=60,
        ),
    )
    planner.create_item(
        day2.id,
        ItemCreate(
            business_id=businesses[5].id,
            type="activity",
            title="Great Zimbabwe Ruins Tour",
            description="Guided tour of the ancient city",
            start_time=datetime.time(10, 0),
            end_time=datetime.time(14, 0),
            cost=20,
        ),
    )

    logger.info(f"Seeded {len(businesses)} businesses and itinerary {itinerary.id}")
    return True
