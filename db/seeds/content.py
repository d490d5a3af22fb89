from __future__ import annotations

import json
import random
from dataclasses import dataclass


@dataclass(frozen=True)
class CategorySpec:
    name: str
    slug: str
    description: str
    # Products are drawn from these base names and priced uniformly within the band.
    product_names: list[str]
    price_min: float
    price_max: float


CATEGORY_SPECS: list[CategorySpec] = [
    CategorySpec(
        name="Electronics",
        slug="electronics",
        description="Phones, audio, computers and accessories.",
        product_names=[
            "Wireless Earbuds",
            "Bluetooth Speaker",
            "Smartphone",
            "Laptop",
            "Tablet",
            "Smartwatch",
            "USB-C Charger",
            "Mechanical Keyboard",
            "Gaming Mouse",
            "4K Monitor",
            "Noise Cancelling Headphones",
            "Portable SSD",
        ],
        price_min=19.99,
        price_max=1499.99,
    ),
    CategorySpec(
        name="Clothing",
        slug="clothing",
        description="Everyday wear for every season.",
        product_names=[
            "Cotton T-Shirt",
            "Denim Jeans",
            "Hooded Sweatshirt",
            "Rain Jacket",
            "Wool Sweater",
            "Running Shorts",
            "Linen Shirt",
            "Winter Coat",
            "Chino Pants",
            "Baseball Cap",
        ],
        price_min=9.99,
        price_max=249.99,
    ),
    CategorySpec(
        name="Books",
        slug="books",
        description="Fiction, non-fiction and technical titles.",
        product_names=[
            "Mystery Novel",
            "Science Fiction Anthology",
            "Cookbook",
            "Travel Guide",
            "Programming Handbook",
            "History of Rome",
            "Poetry Collection",
            "Children's Picture Book",
            "Business Strategy Guide",
            "Graphic Novel",
        ],
        price_min=4.99,
        price_max=79.99,
    ),
    CategorySpec(
        name="Home & Kitchen",
        slug="home-kitchen",
        description="Cookware, appliances and home essentials.",
        product_names=[
            "Chef's Knife",
            "Nonstick Frying Pan",
            "Coffee Maker",
            "Blender",
            "Cast Iron Skillet",
            "Bath Towel Set",
            "Table Lamp",
            "Throw Pillow",
            "Storage Containers",
            "Electric Kettle",
            "Air Fryer",
        ],
        price_min=7.99,
        price_max=399.99,
    ),
    CategorySpec(
        name="Sports & Outdoors",
        slug="sports-outdoors",
        description="Gear for training, camping and the trail.",
        product_names=[
            "Yoga Mat",
            "Dumbbell Set",
            "Camping Tent",
            "Hiking Backpack",
            "Water Bottle",
            "Cycling Helmet",
            "Tennis Racket",
            "Sleeping Bag",
            "Jump Rope",
            "Trekking Poles",
        ],
        price_min=9.99,
        price_max=599.99,
    ),
    CategorySpec(
        name="Beauty",
        slug="beauty",
        description="Skincare, haircare and fragrance.",
        product_names=[
            "Moisturizing Cream",
            "Shampoo",
            "Conditioner",
            "Sunscreen SPF 50",
            "Face Serum",
            "Lip Balm",
            "Eau de Parfum",
            "Hair Dryer",
            "Makeup Brush Set",
        ],
        price_min=3.99,
        price_max=189.99,
    ),
    CategorySpec(
        name="Toys & Games",
        slug="toys-games",
        description="Fun for kids and grown-ups.",
        product_names=[
            "Building Blocks Set",
            "Board Game",
            "Jigsaw Puzzle",
            "Remote Control Car",
            "Plush Bear",
            "Card Game",
            "Science Kit",
            "Dollhouse",
            "Art Supplies Kit",
        ],
        price_min=5.99,
        price_max=149.99,
    ),
]

DEFAULT_PRODUCT_NAMES = ["Gift Card", "Mystery Box", "Sample Pack", "Bundle Deal"]

PRODUCT_ADJECTIVES = ["Classic", "Premium", "Compact", "Deluxe", "Eco", "Pro", "Essential", "Ultra", "Smart", "Vintage"]

FIRST_NAMES = [
    "James", "Mary", "John", "Patricia", "Robert", "Jennifer", "Michael", "Linda", "William", "Elizabeth",
    "David", "Barbara", "Richard", "Susan", "Joseph", "Jessica", "Thomas", "Sarah", "Daniel", "Karen",
    "Olga", "Ivan", "Aisha", "Kenji", "Lucia", "Mateo", "Priya", "Chen", "Fatima", "Noah",
]

LAST_NAMES = [
    "Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis", "Rodriguez", "Martinez",
    "Hernandez", "Lopez", "Wilson", "Anderson", "Thomas", "Taylor", "Moore", "Jackson", "Martin", "Lee",
    "Petrov", "Tanaka", "Khan", "Silva", "Nguyen", "Kim", "Novak", "Rossi", "Schmidt", "Dubois",
]

ORDER_STATUSES = ["pending", "processing", "shipped", "delivered", "cancelled"]

ADDRESSES: list[dict[str, str]] = [
    {"street": "123 Main St", "city": "New York", "state": "NY", "zip": "10001", "country": "USA"},
    {"street": "456 Oak Ave", "city": "Los Angeles", "state": "CA", "zip": "90210", "country": "USA"},
    {"street": "789 Pine Rd", "city": "Chicago", "state": "IL", "zip": "60601", "country": "USA"},
    {"street": "321 Elm St", "city": "Houston", "state": "TX", "zip": "77001", "country": "USA"},
    {"street": "654 Maple Dr", "city": "Phoenix", "state": "AZ", "zip": "85001", "country": "USA"},
    {"street": "987 Cedar Ln", "city": "Philadelphia", "state": "PA", "zip": "19101", "country": "USA"},
    {"street": "147 Birch Way", "city": "San Antonio", "state": "TX", "zip": "78201", "country": "USA"},
    {"street": "258 Spruce St", "city": "San Diego", "state": "CA", "zip": "92101", "country": "USA"},
    {"street": "369 Willow Ave", "city": "Dallas", "state": "TX", "zip": "75201", "country": "USA"},
    {"street": "741 Poplar Rd", "city": "San Jose", "state": "CA", "zip": "95101", "country": "USA"},
    {"street": "852 Beach Blvd", "city": "Miami", "state": "FL", "zip": "33101", "country": "USA"},
    {"street": "963 Mountain Rd", "city": "Denver", "state": "CO", "zip": "80201", "country": "USA"},
    {"street": "159 Lake Dr", "city": "Seattle", "state": "WA", "zip": "98101", "country": "USA"},
    {"street": "753 Park Ave", "city": "Boston", "state": "MA", "zip": "02101", "country": "USA"},
    {"street": "951 Broadway", "city": "Nashville", "state": "TN", "zip": "37201", "country": "USA"},
]

REVIEW_COMMENTS: dict[int, list[str]] = {
    5: [
        "Excellent product! Highly recommend it.",
        "Amazing quality and fast delivery.",
        "Perfect! Exactly what I was looking for.",
        "Outstanding product, will definitely buy again.",
        "Love it! Great value for money.",
        "Fantastic quality and great customer service.",
        "Best purchase I've made in a while!",
        "Absolutely perfect, exceeded my expectations.",
        "Wonderful product, very satisfied!",
        "Top quality, highly recommended!",
        "This product is amazing! Worth every penny.",
        "Exceeded all my expectations. 5 stars!",
        "Perfect in every way. So happy with this purchase.",
    ],
    4: [
        "Very good product, minor issues but overall satisfied.",
        "Good quality, would recommend with minor reservations.",
        "Nice product, works as expected.",
        "Pretty good, meets most of my needs.",
        "Solid product, good value.",
        "Good quality, fast shipping.",
        "Works well, happy with the purchase.",
        "Nice product, minor improvements could be made.",
        "Good overall, would buy again.",
        "Quality product, satisfied with purchase.",
        "Very good, but could use some improvements.",
        "Solid product for the price. Happy with it.",
    ],
    3: [
        "Average product, nothing special.",
        "Okay quality, could be better.",
        "Decent product, meets basic needs.",
        "Average experience, neither good nor bad.",
        "Fair quality, works but has room for improvement.",
        "Okay for the price, nothing exceptional.",
        "Average product, does the job.",
        "Decent quality, could be improved.",
        "Fair value, meets expectations.",
        "Average product, works as described.",
        "Nothing special, but does what it's supposed to.",
        "Mediocre quality. Expected better for the price.",
    ],
    2: [
        "Below average quality, not what I expected.",
        "Disappointed with the quality.",
        "Poor build quality, doesn't last long.",
        "Not worth the money, quality issues.",
        "Below expectations, has several problems.",
        "Poor quality control, defective item.",
        "Not satisfied, quality is lacking.",
        "Disappointing purchase, wouldn't recommend.",
        "Poor value for money.",
        "Quality issues, not as described.",
        "Had high hopes but was let down.",
        "Would not buy again. Too many issues.",
    ],
    1: [
        "Terrible product, complete waste of money.",
        "Worst purchase ever, avoid this product.",
        "Completely broken upon arrival.",
        "Poor quality, doesn't work at all.",
        "Waste of money, very disappointed.",
        "Defective product, terrible experience.",
        "Awful quality, would not recommend.",
        "Complete failure, avoid at all costs.",
        "Terrible experience, poor customer service.",
        "Worst product I've ever bought.",
        "Absolute garbage. Want my money back.",
        "Stay away from this product. Complete disappointment.",
    ],
}

NO_COMMENT = "No comment provided."


def category_spec(name: str) -> CategorySpec | None:
    for spec in CATEGORY_SPECS:
        if spec.name == name:
            return spec
    return None


def random_address(rng: random.Random) -> str:
    return json.dumps(rng.choice(ADDRESSES))


def review_comment(rng: random.Random, rating: int) -> str:
    comments = REVIEW_COMMENTS.get(rating)
    if not comments:
        return NO_COMMENT
    return rng.choice(comments)
