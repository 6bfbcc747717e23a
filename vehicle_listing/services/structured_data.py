"""
schema.org JSON-LD for the public model year and variant pages.

Search engines read these blocks for rich results: breadcrumbs,
product cards with price ranges, ratings and reviews. The
builder only shapes data that is already loaded; it never
queries the database.
"""

import re
import unicodedata
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP

from vehicle_listing.config import Settings, get_settings
from vehicle_listing.models.model_year import ModelYear
from vehicle_listing.models.review import Review
from vehicle_listing.models.vehicle import Vehicle
from vehicle_listing.schemas.seo import ReviewRatings

SCHEMA_CONTEXT = "http://schema.org"
NEW_CONDITION = "http://schema.org/NewCondition"
SIMILAR_LIMIT = 5
MIN_REVIEW_RATING = 3


def slugify(value: str | None) -> str:
    """Lower-case ASCII words joined by dashes."""
    value = unicodedata.normalize("NFKD", value or "")
    value = value.encode("ascii", "ignore").decode("ascii").lower()
    return re.sub(r"[^a-z0-9]+", "-", value).strip("-")


def _unique(values: Iterable) -> list:
    seen = []
    for value in values:
        if value is not None and value not in seen:
            seen.append(value)
    return seen


def _one_or_many(values: list):
    """A single distinct value is emitted as a scalar."""
    if len(values) > 1:
        return values
    return values[0] if values else None


def _title_words(value: str) -> str:
    return " ".join(word[:1].upper() + word[1:] for word in value.split(" "))


def _round_price(value) -> int:
    if value is None:
        return 0
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _w3c(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat(timespec="seconds")


def _timestamp(value: datetime | None) -> int:
    if value is None:
        return int(datetime.now(timezone.utc).timestamp())
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp())


class StructuredDataBuilder:

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

    # --- URLs ---

    def url(self, path: str = "") -> str:
        path = path.strip("/")
        return f"{self.settings.SITE_URL}/{path}" if path else self.settings.SITE_URL

    def asset(self, path: str | None) -> str | None:
        if not path:
            return None
        if path.startswith(("http://", "https://", "//")):
            return path
        return f"{self.settings.ASSET_URL}/{path.lstrip('/')}"

    def model_year_path(self, model_year: ModelYear) -> str:
        return (
            f"{model_year.make.slug}/{model_year.year}/"
            f"{model_year.car_model.slug}"
        )

    # --- Breadcrumbs ---

    def _document(self, schema_type: str) -> dict:
        return {"@context": SCHEMA_CONTEXT, "@type": schema_type}

    def _breadcrumbs(self, links: list[dict]) -> list[dict]:
        return [
            {
                "@type": "ListItem",
                "name": link["name"],
                "position": position,
                "item": {"@id": link["url"]},
            }
            for position, link in enumerate(links, start=1)
        ]

    def _make_links(self, model_year: ModelYear) -> list[dict]:
        return [
            {"url": self.url(), "name": "Home"},
            {"url": self.url("search"), "name": "New Cars"},
            {
                "url": self.url(f"search/{model_year.make.slug.lower()}"),
                "name": model_year.make.name,
            },
        ]

    def model_year_breadcrumbs(self, schema_type: str, model_year: ModelYear) -> dict:
        document = self._document(schema_type)
        document["itemListElement"] = self._breadcrumbs(
            self._make_links(model_year)
        )
        return document

    def vehicle_breadcrumbs(self, schema_type: str, vehicle: Vehicle) -> dict:
        model_year = vehicle.model_year
        links = self._make_links(model_year)
        links.append({
            "url": self.url(
                f"{model_year.make.slug.lower()}/{model_year.year}/"
                f"{model_year.car_model.slug}/{slugify(vehicle.name)}"
            ),
            "name": model_year.name,
        })

        document = self._document(schema_type)
        document["itemListElement"] = self._breadcrumbs(links)
        return document

    # --- Products ---

    def _image_urls(self, model_year: ModelYear, images: Iterable | None) -> list:
        """Search thumb, banner, gallery, then colour images."""
        urls = [self.asset(model_year.search_image_thumb_url)]

        if model_year.banner_image_original_url:
            cache_buster = f"?rand={_timestamp(model_year.updated_at)}"
            urls.append(
                self.asset(model_year.banner_image_original_url) + cache_buster
            )

        for image in images or []:
            url_large = (
                image.get("url_large") if isinstance(image, Mapping)
                else getattr(image, "url_large", None)
            )
            if url_large:
                urls.append(self.asset(url_large))

        for colour in model_year.colours or []:
            urls.append(self.asset(colour.url_large))

        return [url for url in urls if url]

    def _brand(self, name: str) -> dict:
        return {"@type": "Thing", "name": name}

    def _rating(self, ratings: ReviewRatings) -> dict:
        return {
            "@type": "AggregateRating",
            "ratingValue": ratings.average,
            "reviewCount": ratings.total,
        }

    def _aggregate_offer(self, vehicles: list[Vehicle]) -> dict:
        prices = [v.msrp for v in vehicles if v.msrp is not None]
        return {
            "@type": "AggregateOffer",
            "additionalType": "Offer",
            "priceCurrency": self.settings.CURRENCY_INTERNATIONAL,
            "lowPrice": _round_price(min(prices) if prices else None),
            "highPrice": _round_price(max(prices) if prices else None),
        }

    def _offer(self, vehicle: Vehicle) -> dict:
        return {
            "@type": "Offer",
            "priceCurrency": self.settings.CURRENCY_INTERNATIONAL,
            "price": _round_price(vehicle.msrp),
            "itemCondition": NEW_CONDITION,
        }

    def _similar_model_year(
        self,
        model_year: ModelYear,
        ratings: ReviewRatings | None,
    ) -> dict:
        schema = {
            "@type": "Product",
            "url": self.url(self.model_year_path(model_year)),
            "image": self.asset(model_year.search_image_thumb_url),
            "name": model_year.name,
            "brand": self._brand(model_year.make.name),
            "model": model_year.car_model.name,
            "offers": self._aggregate_offer(model_year.vehicles),
        }
        if ratings is not None:
            schema["aggregateRating"] = self._rating(ratings)
        return schema

    def _review(self, review: Review) -> dict:
        return {
            "@type": "Review",
            "author": {"@type": "Person", "name": review.name.strip()},
            "datePublished": _w3c(review.created_at),
            "name": review.title.strip(),
            "reviewBody": review.details.strip(),
            "reviewRating": {
                "@type": "Rating",
                "ratingValue": review.overall_rating,
            },
        }

    def model_year_product(
        self,
        schema_type: str,
        model_year: ModelYear,
        images: Iterable | None = None,
        similar: list[ModelYear] | None = None,
        reviews: list[Review] | None = None,
        ratings: ReviewRatings | None = None,
        similar_ratings: Mapping[int, ReviewRatings] | None = None,
    ) -> dict:
        """
        Product markup for a model year page.

        Specs that differ between variants (body type, fuel,
        seats, gearbox, engine) are listed; a spec shared by all
        variants is given as a single value.
        """
        document = self._document(schema_type)
        vehicles = list(model_year.vehicles)
        make_name = model_year.make.name
        page_url = self.url(self.model_year_path(model_year))

        body_types = _unique(
            v.vehicle_type.name for v in vehicles if v.vehicle_type
        )
        fuel_types = _unique(
            _title_words(v.fuel_type) for v in vehicles if v.fuel_type
        )
        seats = _unique(v.seats for v in vehicles)
        transmissions = _unique(
            v.transmission.name for v in vehicles if v.transmission
        )
        engines = [
            {"@type": "EngineSpecification", "name": f"{capacity} cc"}
            for capacity in sorted(_unique(v.engine_capacity for v in vehicles))
        ]

        document["additionalType"] = "Car"
        document["name"] = model_year.name
        document["brand"] = self._brand(make_name)
        document["model"] = model_year.car_model.name
        document["bodyType"] = _one_or_many(body_types)
        document["fuelType"] = _one_or_many(fuel_types)
        document["seatingCapacity"] = _one_or_many(sorted(seats))
        document["vehicleTransmission"] = _one_or_many(sorted(transmissions))
        document["mainEntityOfPage"] = page_url
        document["url"] = page_url
        document["image"] = self._image_urls(model_year, images)
        if model_year.description:
            document["description"] = model_year.description
        document["vehicleEngine"] = _one_or_many(engines)
        document["manufacturer"] = {"@type": "Organization", "name": make_name}

        if not model_year.calculated_price_upon_request:
            offer = self._aggregate_offer(vehicles)
            offer["offerCount"] = len(vehicles)
            offer["itemCondition"] = NEW_CONDITION
            document["offers"] = offer

        if similar:
            similar_ratings = similar_ratings or {}
            document["isSimilarTo"] = [
                self._similar_model_year(other, similar_ratings.get(other.id))
                for other in similar[:SIMILAR_LIMIT]
            ]

        if reviews and ratings and ratings.average >= MIN_REVIEW_RATING:
            document["aggregateRating"] = self._rating(ratings)
            document["review"] = [self._review(review) for review in reviews]

        return document

    def vehicle_product(
        self,
        schema_type: str,
        vehicle: Vehicle,
        images: Iterable | None = None,
        similar_vehicles: list[Vehicle] | None = None,
    ) -> dict:
        """Product markup for a single variant page."""
        document = self._document(schema_type)
        model_year = vehicle.model_year
        make_name = model_year.make.name
        model_year_url = self.url(self.model_year_path(model_year))
        vehicle_url = f"{model_year_url}/{slugify(vehicle.variant)}"

        document["additionalType"] = "Car"
        document["name"] = f"{model_year.name} {vehicle.variant}"
        document["brand"] = self._brand(make_name)
        document["model"] = model_year.car_model.name
        document["bodyType"] = vehicle.vehicle_type.name
        document["fuelType"] = vehicle.fuel_type
        document["seatingCapacity"] = vehicle.seats
        document["vehicleTransmission"] = (
            vehicle.transmission.name if vehicle.transmission else None
        )
        document["mainEntityOfPage"] = vehicle_url
        document["url"] = vehicle_url
        document["image"] = self._image_urls(model_year, images)

        if model_year.description:
            document["description"] = self.settings.VARIANT_META_DESCRIPTION.format(
                variant_name=f"{model_year.name} {vehicle.variant}"
            )
        document["vehicleEngine"] = {
            "@type": "EngineSpecification",
            "name": f"{vehicle.engine_capacity} cc",
        }
        document["manufacturer"] = {"@type": "Organization", "name": make_name}

        if not model_year.calculated_price_upon_request:
            document["offers"] = self._offer(vehicle)

        if similar_vehicles:
            document["isSimilarTo"] = [
                {
                    "@type": "Product",
                    "url": f"{model_year_url}/{slugify(other.variant)}",
                    "image": self.asset(
                        other.model_year.search_image_thumb_url
                    ),
                    "name": f"{other.model_year.name} {other.variant}",
                    "brand": self._brand(other.model_year.make.name),
                    "model": other.model_year.car_model.name,
                    "offer": self._offer(other),
                }
                for other in similar_vehicles
            ]

        return document
