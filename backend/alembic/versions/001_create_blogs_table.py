"""Create blogs table

Revision ID: 001
Revises: None
Create Date: 2024-01-15 00:00:00.000000+00:00

What:  Creates the `blogs` table and its created_at index.
Rollback: downgrade() drops the table (all posts are lost; image files stay).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the blogs table. Column docs live in app/models/blog.py."""
    op.create_table(
        "blogs",
        sa.Column(
            "id",
            sa.Uuid(),
            nullable=False,
            comment="Opaque identifier assigned at creation",
        ),
        sa.Column("title", sa.Text(), nullable=False, comment="Post title"),
        sa.Column(
            "content",
            sa.Text(),
            nullable=False,
            comment="Markdown source of the post body",
        ),
        sa.Column(
            "image_url",
            sa.String(255),
            nullable=True,
            comment="URL path of the uploaded image, e.g. /uploads/1700000000000000.png",
        ),
        sa.Column(
            "creator",
            sa.String(255),
            nullable=False,
            comment="Free-text username of the author",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When the post was created (UTC)",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    # Backs the list query: ORDER BY created_at DESC
    op.create_index(
        "idx_blogs_created_at",
        "blogs",
        [sa.text("created_at DESC")],
    )


def downgrade() -> None:
    op.drop_index("idx_blogs_created_at", table_name="blogs")
    op.drop_table("blogs")
