"""Sample content for a fresh site."""

import logging
from typing import Any

from src.components.content import CreatePostInput, run_create
from src.components.pages import LoadPagesInput, run_load
from src.components.settings import (
    SETTINGS_PATH,
    get_default_settings,
    save_settings,
)
from src.ports.clock import ClockPort
from src.ports.store import ContentStorePort

logger = logging.getLogger(__name__)

SAMPLE_POSTS: list[dict[str, Any]] = [
    {
        "title": "Aurora X2 Wireless Headphones Review",
        "excerpt": "Class-leading noise cancelling at a mid-range price.",
        "content": (
            "## Sound\n\nWarm, detailed and never fatiguing.\n\n"
            "## Battery\n\nA full week of commuting on one charge.\n\n"
            "> The best value pair we tested this year."
        ),
        "coverImage": "",
        "category": "Audio & Headphones",
        "tags": ["headphones", "wireless", "anc"],
        "readingTime": 6,
        "productName": "Aurora X2",
        "productPrice": 129.99,
        "affiliateUrl": "https://www.amazon.com/",
        "pros": ["Excellent noise cancelling", "Long battery life"],
        "cons": ["Bulky case"],
        "specs": {"Battery": "40 hours", "Weight": "250 g", "Bluetooth": "5.3"},
        "featured": True,
    },
    {
        "title": "Nimbus Budget Smartwatch Review",
        "excerpt": "A capable fitness tracker for under fifty dollars.",
        "content": "Surprisingly accurate heart-rate tracking and a bright screen.",
        "category": "Wearable Technology",
        "tags": ["smartwatch", "fitness"],
        "readingTime": 4,
        "productName": "Nimbus Watch",
        "productPrice": 39,
        "affiliateUrl": "https://www.amazon.com/",
        "pros": ["Cheap", "Ten-day battery"],
        "cons": ["No GPS"],
        "specs": {"Display": "1.4 in AMOLED", "Water resistance": "5 ATM"},
        "featured": True,
    },
    {
        "title": "Forge Pro 16 Laptop Review",
        "excerpt": "A workstation-class laptop that still fits in a backpack.",
        "content": "The Forge Pro 16 pairs a fast CPU with a colour-accurate panel.",
        "category": "Laptops",
        "tags": ["laptop", "creator"],
        "readingTime": 8,
        "productName": "Forge Pro 16",
        "productPrice": 1899,
        "affiliateUrl": "https://www.amazon.com/",
        "pros": ["Fast", "Great screen"],
        "cons": ["Loud fans under load", "Heavy charger"],
        "specs": {"CPU": "14 cores", "RAM": "32 GB", "Storage": "1 TB SSD"},
        "featured": False,
    },
]


def seed(store: ContentStorePort, clock: ClockPort) -> int:
    """
    Write default settings, page contents and sample posts.

    Existing settings and posts with the same slug are left alone. Returns
    the number of posts created.
    """
    if store.get_singleton(SETTINGS_PATH) is None:
        save_settings(store, get_default_settings())
        logger.info("Seeded default settings")

    run_load(LoadPagesInput(initialise=True), store=store, clock=clock)

    created = 0
    for data in SAMPLE_POSTS:
        result = run_create(CreatePostInput(data=data), store=store, clock=clock)
        if result.success:
            created += 1
        elif any(e.code == "slug_exists" for e in result.errors):
            logger.info("Skipping existing post %s", data["title"])
        else:
            logger.warning("Could not seed %s: %s", data["title"], result.errors)
    return created
