# =============================================================================
# core/schemas/tables.py - Managed Table Definitions
# =============================================================================
# Column definitions for every table the console manages. Table names and
# column keys are the wire contract with the Supabase project: renaming one
# here requires a matching database migration.
# =============================================================================

from core.models.schema import ColumnSpec, ColumnType, TableName, TableSchema


def _col(
    key: str,
    label: str,
    type: ColumnType = ColumnType.TEXT,
    width: int = 150,
    min_width: int = 100,
    **kwargs,
) -> ColumnSpec:
    return ColumnSpec(key=key, label=label, type=type, width=width, min_width=min_width, **kwargs)


# Shared columns
def _id() -> ColumnSpec:
    return _col("id", "ID", width=280, min_width=200, read_only=True)


def _timestamps() -> tuple[ColumnSpec, ...]:
    return (
        _col("created_at", "Created", ColumnType.DATE, 150, 120, read_only=True),
        _col("updated_at", "Updated", ColumnType.DATE, 150, 120, read_only=True),
    )


def _seo() -> tuple[ColumnSpec, ...]:
    return (
        _col("seo_title", "SEO Title", ColumnType.TEXT, 250, 150),
        _col("seo_description", "SEO Description", ColumnType.TEXTAREA, 300, 200),
        _col("seo_keywords", "SEO Keywords", ColumnType.ARRAY, 200, 150),
    )


T = ColumnType

POSTS = TableSchema(
    table_name=TableName.POSTS,
    display_name="Blog Posts",
    icon="FileText",
    description="Manage blog content, resources, guides, and case studies",
    columns=(
        _id(),
        _col("title", "Title", T.TEXT, 250, 150, required=True),
        _col("slug", "Slug", T.TEXT, 200, 150, required=True),
        _col("excerpt", "Excerpt", T.TEXTAREA, 300, 200),
        _col("content", "Content", T.TEXTAREA, 400, 250),
        _col("content_type", "Content Type", T.SELECT, 130, 120,
             options=["blog", "resource", "guide", "case_study"]),
        _col("featured_image", "Featured Image", T.IMAGE, 250, 200),
        _col("gallery_images", "Gallery Images", T.ARRAY, 200, 150),
        _col("author_id", "Author ID", T.TEXT, 280, 200),
        _col("category", "Category", T.TEXT, 150, 100),
        _col("tags", "Tags", T.ARRAY, 200, 150),
        _col("read_time_minutes", "Read Time (min)", T.NUMBER, 130, 100),
        _col("is_featured", "Featured", T.BOOLEAN, 100, 80),
        _col("is_published", "Published", T.BOOLEAN, 100, 80),
        _col("published_at", "Published At", T.DATE, 150, 120),
        *_seo(),
        *_timestamps(),
    ),
)

TEAM_MEMBERS = TableSchema(
    table_name=TableName.TEAM_MEMBERS,
    display_name="Team Members",
    icon="Users",
    description="Manage team member profiles and information",
    columns=(
        _id(),
        _col("name", "Name", T.TEXT, 180, 120, required=True),
        _col("title", "Title", T.TEXT, 200, 150),
        _col("bio", "Bio", T.TEXTAREA, 350, 200),
        _col("headshot", "Headshot URL", T.IMAGE, 250, 200),
        _col("email", "Email", T.TEXT, 200, 150),
        _col("social_links", "Social Links (JSON)", T.TEXTAREA, 250, 200),
        _col("skills", "Skills", T.ARRAY, 200, 150),
        _col("years_experience", "Years Exp", T.NUMBER, 100, 80),
        _col("is_active", "Active", T.BOOLEAN, 80, 70),
        _col("display_order", "Display Order", T.NUMBER, 120, 100),
        _col("user_id", "User ID", T.TEXT, 280, 200),
        *_timestamps(),
    ),
)

SERVICES = TableSchema(
    table_name=TableName.SERVICES,
    display_name="Services",
    icon="Briefcase",
    description="Manage service offerings and pricing",
    columns=(
        _id(),
        _col("title", "Title", T.TEXT, 200, 150, required=True),
        _col("slug", "Slug", T.TEXT, 200, 150, required=True),
        _col("hook", "Hook", T.TEXT, 300, 200),
        _col("description", "Description", T.TEXTAREA, 350, 200),
        _col("image", "Image URL", T.IMAGE, 250, 200),
        _col("icon", "Icon", T.TEXT, 150, 100),
        _col("category", "Category", T.TEXT, 150, 100),
        _col("benefits", "Benefits", T.ARRAY, 250, 200),
        _col("pricing_model", "Pricing Model", T.TEXT, 150, 120),
        _col("base_price", "Base Price", T.NUMBER, 120, 100),
        _col("currency", "Currency", T.TEXT, 80, 70),
        _col("tags", "Tags", T.ARRAY, 200, 150),
        _col("display_order", "Display Order", T.NUMBER, 120, 100),
        _col("is_active", "Active", T.BOOLEAN, 80, 70),
        *_seo(),
        *_timestamps(),
    ),
)

CASE_STUDIES = TableSchema(
    table_name=TableName.CASE_STUDIES,
    display_name="Case Studies",
    icon="BookOpen",
    description="Manage client case studies and success stories",
    columns=(
        _id(),
        _col("title", "Title", T.TEXT, 250, 150, required=True),
        _col("slug", "Slug", T.TEXT, 200, 150, required=True),
        _col("client_name", "Client Name", T.TEXT, 180, 120),
        _col("industry", "Industry", T.TEXT, 150, 100),
        _col("description", "Description", T.TEXTAREA, 350, 200),
        _col("challenge", "Challenge", T.TEXTAREA, 300, 200),
        _col("solution", "Solution", T.TEXTAREA, 300, 200),
        _col("results", "Results", T.TEXTAREA, 300, 200),
        _col("featured_image", "Featured Image", T.IMAGE, 250, 200),
        _col("metrics", "Metrics (JSON)", T.TEXTAREA, 250, 200),
        _col("services_provided", "Services", T.ARRAY, 200, 150),
        _col("technologies_used", "Technologies", T.ARRAY, 200, 150),
        _col("timeline_months", "Timeline (mo)", T.NUMBER, 120, 100),
        _col("testimonial_quote", "Testimonial", T.TEXTAREA, 300, 200),
        _col("testimonial_position", "Position", T.TEXT, 150, 120),
        _col("is_published", "Published", T.BOOLEAN, 100, 80),
        _col("is_featured", "Featured", T.BOOLEAN, 100, 80),
        _col("display_order", "Display Order", T.NUMBER, 120, 100),
        *_seo(),
        *_timestamps(),
    ),
)

TESTIMONIALS = TableSchema(
    table_name=TableName.TESTIMONIALS,
    display_name="Testimonials",
    icon="MessageSquare",
    description="Manage client testimonials and reviews",
    columns=(
        _id(),
        _col("client_name", "Client Name", T.TEXT, 180, 120, required=True),
        _col("client_position", "Position", T.TEXT, 200, 150),
        _col("client_company", "Company", T.TEXT, 180, 120),
        _col("content", "Content", T.TEXTAREA, 400, 250),
        _col("rating", "Rating", T.NUMBER, 100, 80),
        _col("avatar", "Avatar URL", T.IMAGE, 250, 200),
        _col("is_published", "Published", T.BOOLEAN, 100, 80),
        _col("is_featured", "Featured", T.BOOLEAN, 100, 80),
        _col("display_order", "Display Order", T.NUMBER, 120, 100),
        _col("source", "Source", T.TEXT, 150, 100),
        *_timestamps(),
    ),
)

CONTACT_SUBMISSIONS = TableSchema(
    table_name=TableName.CONTACT_SUBMISSIONS,
    display_name="Contact Form Submissions",
    icon="Mail",
    description="View and manage contact form submissions",
    columns=(
        _id(),
        _col("name", "Name", T.TEXT, 180, 120),
        _col("email", "Email", T.TEXT, 200, 150),
        _col("phone", "Phone", T.TEXT, 150, 120),
        _col("company", "Company", T.TEXT, 180, 120),
        _col("message", "Message", T.TEXTAREA, 400, 250),
        _col("services_interested", "Services", T.ARRAY, 200, 150),
        _col("budget_range", "Budget Range", T.TEXT, 150, 120),
        _col("timeline", "Timeline", T.TEXT, 150, 120),
        _col("utm_data", "UTM Data (JSON)", T.TEXTAREA, 250, 200),
        _col("is_processed", "Processed", T.BOOLEAN, 100, 80),
        _col("processed_by", "Processed By", T.TEXT, 280, 200),
        _col("processed_at", "Processed At", T.DATE, 150, 120),
        _col("lead_id", "Lead ID", T.TEXT, 280, 200),
        _col("metadata", "Metadata (JSON)", T.TEXTAREA, 250, 200),
        *_timestamps(),
    ),
)

LEADS = TableSchema(
    table_name=TableName.LEADS,
    display_name="Leads",
    icon="Target",
    description="Manage sales leads and prospects",
    columns=(
        _id(),
        _col("email", "Email", T.TEXT, 200, 150, required=True),
        _col("first_name", "First Name", T.TEXT, 150, 100),
        _col("last_name", "Last Name", T.TEXT, 150, 100),
        _col("company", "Company", T.TEXT, 180, 120),
        _col("phone", "Phone", T.TEXT, 150, 120),
        _col("website", "Website", T.TEXT, 200, 150),
        _col("source", "Source", T.TEXT, 150, 100),
        _col("utm_source", "UTM Source", T.TEXT, 150, 120),
        _col("utm_medium", "UTM Medium", T.TEXT, 150, 120),
        _col("utm_campaign", "UTM Campaign", T.TEXT, 150, 120),
        _col("status", "Status", T.SELECT, 130, 120,
             options=["new", "contacted", "qualified", "proposal", "converted", "lost"]),
        _col("score", "Score", T.NUMBER, 100, 80),
        _col("notes", "Notes", T.TEXTAREA, 300, 200),
        _col("interested_services", "Services", T.ARRAY, 200, 150),
        _col("budget_range", "Budget Range", T.TEXT, 150, 120),
        _col("timeline", "Timeline", T.TEXT, 150, 120),
        _col("assigned_to", "Assigned To", T.TEXT, 280, 200),
        _col("converted_at", "Converted At", T.DATE, 150, 120),
        _col("metadata", "Metadata (JSON)", T.TEXTAREA, 250, 200),
        *_timestamps(),
    ),
)

SETTINGS = TableSchema(
    table_name=TableName.SETTINGS,
    display_name="Site Settings",
    icon="Settings",
    description="Manage site-wide configuration and settings",
    columns=(
        _id(),
        _col("key", "Key", T.TEXT, 200, 150, required=True),
        _col("value", "Value (JSON)", T.TEXTAREA, 350, 250),
        _col("category", "Category", T.TEXT, 150, 100),
        _col("description", "Description", T.TEXTAREA, 300, 200),
        _col("is_public", "Public", T.BOOLEAN, 80, 70),
        _col("updated_by", "Updated By", T.TEXT, 280, 200),
        *_timestamps(),
    ),
)

MEDIA = TableSchema(
    table_name=TableName.MEDIA,
    display_name="Media Assets",
    icon="Image",
    description="Manage uploaded media files and assets",
    columns=(
        _id(),
        _col("filename", "Filename", T.TEXT, 200, 150, required=True),
        _col("original_filename", "Original Name", T.TEXT, 200, 150),
        _col("file_path", "File Path", T.TEXT, 250, 200),
        _col("file_url", "File URL", T.IMAGE, 250, 200),
        _col("file_type", "File Type", T.TEXT, 120, 100),
        _col("file_size", "Size (bytes)", T.NUMBER, 120, 100),
        _col("mime_type", "MIME Type", T.TEXT, 150, 120),
        _col("width", "Width", T.NUMBER, 100, 80),
        _col("height", "Height", T.NUMBER, 100, 80),
        _col("alt_text", "Alt Text", T.TEXTAREA, 250, 200),
        _col("caption", "Caption", T.TEXTAREA, 250, 200),
        _col("metadata", "Metadata (JSON)", T.TEXTAREA, 250, 200),
        _col("uploaded_by", "Uploaded By", T.TEXT, 280, 200),
        _col("folder", "Folder", T.TEXT, 150, 120),
        _col("is_public", "Public", T.BOOLEAN, 80, 70),
        *_timestamps(),
    ),
)

SITE_MEDIA = TableSchema(
    table_name=TableName.SITE_MEDIA,
    display_name="Site Media",
    icon="Image",
    description="Manage all site images and videos with context",
    columns=(
        _id(),
        _col("media_key", "Media Key", T.TEXT, 250, 150, required=True),
        _col("media_type", "Type", T.SELECT, 120, 100, options=["image", "video"], required=True),
        _col("media_url", "URL", T.IMAGE, 300, 200, required=True),
        _col("page_slug", "Page", T.TEXT, 180, 120),
        _col("section_name", "Section", T.TEXT, 150, 100),
        _col("purpose", "Purpose", T.TEXT, 200, 150),
        _col("alt_text", "Alt Text", T.TEXTAREA, 250, 200),
        _col("caption", "Caption", T.TEXTAREA, 250, 200),
        _col("title", "Title", T.TEXT, 200, 150),
        _col("width", "Width", T.NUMBER, 100, 80),
        _col("height", "Height", T.NUMBER, 100, 80),
        _col("file_size", "Size (bytes)", T.NUMBER, 120, 100),
        _col("mime_type", "MIME Type", T.TEXT, 150, 120),
        _col("cloudinary_public_id", "Cloudinary ID", T.TEXT, 200, 150),
        _col("cloudinary_folder", "Cloudinary Folder", T.TEXT, 180, 120),
        _col("cloudinary_version", "Version", T.TEXT, 120, 100),
        _col("cloudinary_format", "Format", T.TEXT, 100, 80),
        _col("display_order", "Order", T.NUMBER, 100, 80),
        _col("is_active", "Active", T.BOOLEAN, 80, 70),
        _col("is_featured", "Featured", T.BOOLEAN, 90, 80),
        _col("lazy_load", "Lazy Load", T.BOOLEAN, 100, 80),
        _col("seo_optimized", "SEO OK", T.BOOLEAN, 90, 80),
        _col("accessibility_checked", "A11y OK", T.BOOLEAN, 90, 80),
        _col("tags", "Tags", T.ARRAY, 200, 150),
        _col("metadata", "Metadata (JSON)", T.TEXTAREA, 250, 200),
        *_timestamps(),
    ),
)


ALL_SCHEMAS: tuple[TableSchema, ...] = (
    POSTS,
    TEAM_MEMBERS,
    SERVICES,
    CASE_STUDIES,
    TESTIMONIALS,
    CONTACT_SUBMISSIONS,
    LEADS,
    SETTINGS,
    MEDIA,
    SITE_MEDIA,
)
