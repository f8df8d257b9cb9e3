"""create question bank

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-18

"""

from alembic import op
import sqlalchemy as sa


revision = "0002"
down_revision = "0001"
branch_labels = None
depends_on = None


question_type_enum = sa.Enum("single", "multiple", "essay", name="questiontype")
difficulty_enum = sa.Enum("easy", "medium", "hard", name="difficulty")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "question_topics",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("document_id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.JSON(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_question_topics_document_id", "question_topics", ["document_id"], unique=True)
    op.create_index("ix_question_topics_name", "question_topics", ["name"], unique=False)

    op.create_table(
        "question_tags",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("document_id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_question_tags_document_id", "question_tags", ["document_id"], unique=True)
    op.create_index("ix_question_tags_name", "question_tags", ["name"], unique=False)
    op.create_index("ix_question_tags_slug", "question_tags", ["slug"], unique=False)

    op.create_table(
        "questions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("document_id", sa.String(length=64), nullable=False),
        sa.Column("code", sa.String(length=100), nullable=True),
        sa.Column("question", sa.JSON(), nullable=False),
        sa.Column("type", question_type_enum, nullable=False),
        sa.Column("answers", sa.JSON(), nullable=False),
        sa.Column("correct_answer", sa.JSON(), nullable=False),
        sa.Column("explanation", sa.JSON(), nullable=True),
        sa.Column("difficulty", difficulty_enum, nullable=False),
        sa.Column("source", sa.String(length=500), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column(
            "topic_id",
            sa.Integer(),
            sa.ForeignKey("question_topics.id", ondelete="SET NULL"),
            nullable=True,
        ),
        *_timestamps(),
    )
    op.create_index("ix_questions_document_id", "questions", ["document_id"], unique=True)
    op.create_index("ix_questions_code", "questions", ["code"], unique=False)
    op.create_index("ix_questions_difficulty", "questions", ["difficulty"], unique=False)
    op.create_index("ix_questions_topic_id", "questions", ["topic_id"], unique=False)

    op.create_table(
        "question_tag_links",
        sa.Column("question_id", sa.Integer(), sa.ForeignKey("questions.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("tag_id", sa.Integer(), sa.ForeignKey("question_tags.id", ondelete="CASCADE"), primary_key=True),
    )


def downgrade() -> None:
    op.drop_table("question_tag_links")
    op.drop_index("ix_questions_topic_id", table_name="questions")
    op.drop_index("ix_questions_difficulty", table_name="questions")
    op.drop_index("ix_questions_code", table_name="questions")
    op.drop_index("ix_questions_document_id", table_name="questions")
    op.drop_table("questions")
    op.drop_index("ix_question_tags_slug", table_name="question_tags")
    op.drop_index("ix_question_tags_name", table_name="question_tags")
    op.drop_index("ix_question_tags_document_id", table_name="question_tags")
    op.drop_table("question_tags")
    op.drop_index("ix_question_topics_name", table_name="question_topics")
    op.drop_index("ix_question_topics_document_id", table_name="question_topics")
    op.drop_table("question_topics")
    op.execute("DROP TYPE IF EXISTS questiontype")
    op.execute("DROP TYPE IF EXISTS difficulty")
