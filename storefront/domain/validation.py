# storefront/domain/validation.py
import re
from decimal import Decimal, InvalidOperation

from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from storefront.data.models.product import CATEGORIES
from storefront.data.models.feedback import FEEDBACK_TYPES, FEEDBACK_STATUSES
from storefront.domain.errors import ValidationError

_EMAIL = TypeAdapter(EmailStr)
_URL_RE = re.compile(r"^https?://[^\s/$.?#].[^\s]*$", re.IGNORECASE)


def _err(field, message):
    return {"field": field, "message": message}


def _is_email(value) -> bool:
    try:
        _EMAIL.validate_python(value)
    except PydanticValidationError:
        return False
    return True


def _check_text(errors, data, field, label, max_length, partial):
    if field not in data:
        if not partial:
            errors.append(_err(field, f"{label} is required"))
        return
    value = data[field]
    if value is None or not str(value).strip():
        errors.append(_err(field, f"{label} is required"))
    elif len(str(value).strip()) > max_length:
        errors.append(_err(field, f"{label} cannot exceed {max_length} characters"))


def validate_product(data: dict, partial: bool = False) -> list[dict]:
    """
    Zwraca liste bledow dla danych produktu; pusta lista = ok.
    partial=True sprawdza tylko pola ktore przyszly (update).
    """
    errors = []

    _check_text(errors, data, "name", "Product name", 100, partial)
    _check_text(errors, data, "description", "Product description", 1000, partial)

    if "price" in data:
        try:
            price = Decimal(str(data["price"]))
        except (InvalidOperation, ValueError):
            errors.append(_err("price", "Price must be a number"))
        else:
            if not price.is_finite() or price < Decimal("0.01"):
                errors.append(_err("price", "Price must be at least 0.01"))
    elif not partial:
        errors.append(_err("price", "Product price is required"))

    if "stock" in data:
        stock = data["stock"]
        if isinstance(stock, bool) or not isinstance(stock, int):
            errors.append(_err("stock", "Stock must be an integer"))
        elif stock < 0:
            errors.append(_err("stock", "Stock cannot be negative"))

    if "category" in data:
        if data["category"] not in CATEGORIES:
            errors.append(_err("category", "Invalid category"))
    elif not partial:
        errors.append(_err("category", "Product category is required"))

    return errors


def validate_feedback(data: dict, partial: bool = False) -> list[dict]:
    errors = []

    _check_text(errors, data, "title", "Title", 100, partial)
    _check_text(errors, data, "description", "Description", 2000, partial)

    ftype = data.get("type", None if partial else "feedback")
    if ftype is not None and ftype not in FEEDBACK_TYPES:
        errors.append(_err("type", "Invalid feedback type"))

    if data.get("status") is not None and data["status"] not in FEEDBACK_STATUSES:
        errors.append(_err("status", "Invalid status"))

    rating = data.get("rating")
    if rating is not None:
        if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
            errors.append(_err("rating", "Rating must be between 1 and 5"))
    elif ftype == "feedback" and not partial:
        # ocena wymagana tylko dla typu feedback
        errors.append(_err("rating", "Rating is required for feedback type"))

    email = data.get("user_email")
    if email and not _is_email(email):
        errors.append(_err("user_email", f"{email} is not a valid email address"))

    page_url = data.get("page_url")
    if page_url and not _URL_RE.match(page_url):
        errors.append(_err("page_url", "Page URL must be a valid URL"))

    if data.get("browser_info") is not None and not isinstance(data["browser_info"], dict):
        errors.append(_err("browser_info", "Browser info must be an object"))

    return errors


def ensure_valid(errors: list[dict]) -> None:
    if errors:
        raise ValidationError(errors)
