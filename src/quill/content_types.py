"""Content type registry with field definitions."""

import re
from typing import Any, List, Optional

from pydantic import BaseModel


FIELD_TYPES = (
    "text",
    "textarea",
    "richtext",
    "email",
    "url",
    "number",
    "date",
    "boolean",
    "image",
    "gallery",
    "select",
    "array",
    "object",
    "reference",
)


class FieldValidation(BaseModel):
    """Numeric bounds or a regex the value must satisfy."""
    min: Optional[float] = None
    max: Optional[float] = None
    pattern: Optional[str] = None


class FieldDefinition(BaseModel):
    """A single editable field of a content type."""
    name: str
    label: str
    type: str
    required: bool = False
    placeholder: Optional[str] = None
    help_text: Optional[str] = None
    default_value: Any = None
    options: Optional[List[str]] = None  # select fields
    item_fields: Optional[List["FieldDefinition"]] = None  # array/object fields
    reference_type: Optional[str] = None  # reference fields
    validation: Optional[FieldValidation] = None


class ContentTypeDefinition(BaseModel):
    """A content type as shown in the admin navigation."""
    name: str
    label: str
    singular: str
    plural: str
    icon: str
    description: str
    fields: List[FieldDefinition]
    show_in_nav: bool = False

    def get_field(self, name: str) -> Optional[FieldDefinition]:
        for field in self.fields:
            if field.name == name:
                return field
        return None


def _field(name: str, label: str, type: str, **kwargs) -> FieldDefinition:
    return FieldDefinition(name=name, label=label, type=type, **kwargs)


_TAG_ITEMS = [_field("tag", "Tag", "text")]


CONTENT_TYPES: dict[str, ContentTypeDefinition] = {
    "homepage": ContentTypeDefinition(
        name="homepage",
        label="Homepage",
        singular="Homepage",
        plural="Homepage",
        icon="Home",
        description="Manage homepage content and sections",
        show_in_nav=True,
        fields=[
            # Hero
            _field("hero_title", "Hero Title", "text", required=True, placeholder="Main headline"),
            _field("hero_subtitle", "Hero Subtitle", "textarea", placeholder="Supporting text"),
            _field("hero_cta_text", "Hero CTA Button Text", "text", placeholder="e.g., Get Started"),
            _field("hero_cta_link", "Hero CTA Link", "url", placeholder="Button destination URL"),
            _field("hero_background", "Hero Background Image", "image"),
            # About
            _field("about_heading", "About Section Heading", "text"),
            _field("about_description", "About Description", "richtext"),
            _field("about_images", "About Images", "gallery"),
            # Services
            _field("services_heading", "Services Heading", "text"),
            _field("services_description", "Services Description", "textarea"),
            # Stats
            _field(
                "stats_auto_calculate",
                "Auto-calculate Statistics",
                "boolean",
                default_value=True,
                help_text="Automatically calculate from team, clients, projects data",
            ),
            # Testimonials
            _field(
                "testimonials",
                "Testimonials",
                "array",
                item_fields=[
                    _field("name", "Client Name", "text", required=True),
                    _field("company", "Company", "text"),
                    _field("quote", "Quote", "textarea", required=True),
                    _field("avatar", "Avatar Image", "image"),
                ],
            ),
            # CTA
            _field("cta_heading", "CTA Section Heading", "text"),
            _field("cta_description", "CTA Description", "textarea"),
            _field("cta_button_text", "CTA Button Text", "text"),
            _field("cta_button_link", "CTA Button Link", "url"),
            # Partners
            _field("partners_logos", "Partner/Client Logos", "gallery"),
        ],
    ),
    "portfolio": ContentTypeDefinition(
        name="portfolio",
        label="Portfolio",
        singular="Portfolio Item",
        plural="Portfolio Items",
        icon="Briefcase",
        description="Showcase your work and projects",
        show_in_nav=True,
        fields=[
            _field("title", "Project Title", "text", required=True),
            _field(
                "category",
                "Category",
                "select",
                required=True,
                options=[
                    "Facade & Cladding",
                    "Structural Elements",
                    "Art Installation & Sculpture",
                    "Partition & Screen",
                    "Stairway & Railing",
                    "Light Fixture & Signage",
                    "Furniture & Accessories",
                    "Doors & Windows",
                ],
            ),
            _field("description", "Description", "richtext", required=True),
            _field("location", "Project Location", "text", placeholder="City, Country"),
            _field("year", "Project Year", "number", validation=FieldValidation(min=1900, max=2100)),
            _field("client_name", "Client Name", "text"),
            _field("tags", "Tags", "array", item_fields=_TAG_ITEMS),
        ],
    ),
    "services": ContentTypeDefinition(
        name="services",
        label="Services",
        singular="Service",
        plural="Services",
        icon="Wrench",
        description="Manage your service offerings",
        show_in_nav=True,
        fields=[
            _field("service_name", "Service Name", "text", required=True),
            _field("description", "Description", "richtext", required=True),
            _field("icon_image", "Icon/Image", "image"),
            _field(
                "order",
                "Display Order",
                "number",
                default_value=0,
                help_text="Lower numbers appear first",
            ),
            _field("featured_homepage", "Featured on Homepage", "boolean", default_value=False),
        ],
    ),
    "team": ContentTypeDefinition(
        name="team",
        label="Team",
        singular="Team Member",
        plural="Team Members",
        icon="Users",
        description="Manage team members",
        show_in_nav=True,
        fields=[
            _field("name", "Full Name", "text", required=True),
            _field("position", "Position/Role", "text", required=True),
            _field("bio", "Biography", "richtext"),
            _field("email", "Email", "email"),
            _field("linkedin", "LinkedIn Profile URL", "url"),
            _field("join_date", "Join Date", "date"),
            _field("location", "Location/Office", "text", placeholder="e.g., Kochi, Kerala"),
        ],
    ),
    "projects": ContentTypeDefinition(
        name="projects",
        label="Projects",
        singular="Project",
        plural="Projects",
        icon="FolderOpen",
        description="Track all projects",
        show_in_nav=True,
        fields=[
            _field("project_name", "Project Name", "text", required=True),
            _field("client", "Client", "reference", reference_type="clients"),
            _field(
                "location",
                "Location (City)",
                "text",
                required=True,
                placeholder="City name for statistics",
            ),
            _field("start_date", "Start Date", "date"),
            _field("end_date", "End Date", "date"),
            _field(
                "status",
                "Status",
                "select",
                options=["completed", "ongoing", "upcoming"],
                default_value="ongoing",
            ),
            _field(
                "portfolio_items",
                "Portfolio Items",
                "reference",
                reference_type="portfolio",
                help_text="Link portfolio items to this project",
            ),
            _field("value", "Project Value/Budget", "text", placeholder="Optional"),
        ],
    ),
    "clients": ContentTypeDefinition(
        name="clients",
        label="Clients",
        singular="Client",
        plural="Clients",
        icon="Building",
        description="Manage client companies",
        show_in_nav=True,
        fields=[
            _field("company_name", "Company Name", "text", required=True),
            _field("website", "Website", "url"),
            _field("first_project_date", "First Project Date", "date"),
        ],
    ),
    "testimonials": ContentTypeDefinition(
        name="testimonials",
        label="Testimonials",
        singular="Testimonial",
        plural="Testimonials",
        icon="MessageSquare",
        description="Client testimonials and reviews",
        show_in_nav=True,
        fields=[
            _field("client_name", "Client Name", "text", required=True),
            _field("company", "Company", "text"),
            _field("position", "Position/Title", "text"),
            _field("quote", "Testimonial Quote", "textarea", required=True),
            _field(
                "rating",
                "Rating",
                "number",
                validation=FieldValidation(min=1, max=5),
                default_value=5,
            ),
            _field("featured_homepage", "Featured on Homepage", "boolean", default_value=False),
            _field("project_reference", "Related Project", "reference", reference_type="projects"),
        ],
    ),
    "blogs": ContentTypeDefinition(
        name="blogs",
        label="Blogs",
        singular="Blog Post",
        plural="Blog Posts",
        icon="FileText",
        description="Blog posts and articles",
        show_in_nav=True,
        fields=[
            _field("title", "Post Title", "text", required=True),
            _field("content", "Content", "richtext", required=True),
            _field("excerpt", "Excerpt", "textarea", placeholder="Short description for listings"),
            _field("author", "Author", "text"),
            _field("publish_date", "Publish Date", "date"),
            _field("tags", "Tags", "array", item_fields=_TAG_ITEMS),
        ],
    ),
}


def get_content_type(name: str) -> Optional[ContentTypeDefinition]:
    """Get content type definition by name."""
    return CONTENT_TYPES.get(name)


def get_nav_content_types() -> List[ContentTypeDefinition]:
    """Content types that appear in the admin navigation."""
    return [ct for ct in CONTENT_TYPES.values() if ct.show_in_nav]


def is_empty(value: Any) -> bool:
    """True for None, blank strings and empty collections."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def validate_field(value: Any, field: FieldDefinition, check_required: bool = True) -> Optional[str]:
    """
    Validate a single value against its field definition.

    Returns:
        An error message, or None if the value is acceptable.
    """
    if is_empty(value):
        if check_required and field.required:
            return f"{field.label} is required"
        return None

    if field.type == "number":
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return f"{field.label} must be a number"
        if field.validation is not None:
            if field.validation.min is not None and value < field.validation.min:
                return f"{field.label} must be at least {field.validation.min:g}"
            if field.validation.max is not None and value > field.validation.max:
                return f"{field.label} must be at most {field.validation.max:g}"

    if field.type == "boolean" and not isinstance(value, bool):
        return f"{field.label} must be true or false"

    if field.type == "select" and field.options and value not in field.options:
        return f"{field.label} must be one of: {', '.join(field.options)}"

    if field.validation is not None and field.validation.pattern and isinstance(value, str):
        if not re.fullmatch(field.validation.pattern, value):
            return f"{field.label} has an invalid format"

    return None


def validate_fields(
    content_type: str,
    fields: List[dict],
    check_required: bool = True,
) -> List[str]:
    """
    Validate a content entry's field list against the registry.

    Unknown content types and unknown field keys are not validated.
    """
    definition = get_content_type(content_type)
    if definition is None:
        return []

    values = {item.get("key"): item.get("value") for item in fields}
    errors = []
    for field in definition.fields:
        if field.name not in values and not (check_required and field.required):
            continue
        error = validate_field(values.get(field.name), field, check_required=check_required)
        if error:
            errors.append(error)
    return errors
