"""create_onepost_tables

Revision ID: a1c4e7f20b3d
Revises:
Create Date: 2026-10-19 12:00:00.000000
"""
from __future__ import annotations

from alembic import op

revision = "a1c4e7f20b3d"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE users (
            id          VARCHAR(255) PRIMARY KEY,
            email       VARCHAR(255),
            name        VARCHAR(100),
            image_url   VARCHAR(500),
            created_at  TIMESTAMP    NOT NULL DEFAULT now(),
            updated_at  TIMESTAMP    NOT NULL DEFAULT now()
        )
    """)
    op.execute("CREATE INDEX ix_users_email ON users(email)")
    op.execute("CREATE INDEX ix_users_created_at ON users(created_at)")

    op.execute("""
        CREATE TABLE posts (
            id          UUID         PRIMARY KEY,
            title       VARCHAR(255) NOT NULL,
            content     TEXT         NOT NULL,
            image_url   VARCHAR(500),
            author_id   VARCHAR(255) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            created_at  TIMESTAMP    NOT NULL DEFAULT now(),
            updated_at  TIMESTAMP    NOT NULL DEFAULT now()
        )
    """)
    op.execute("CREATE INDEX ix_posts_author_id ON posts(author_id)")
    op.execute("CREATE INDEX ix_posts_created_at ON posts(created_at)")

    op.execute("""
        CREATE TABLE comments (
            id          UUID         PRIMARY KEY,
            post_id     UUID         NOT NULL REFERENCES posts(id) ON DELETE CASCADE,
            user_id     VARCHAR(255) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            content     TEXT         NOT NULL,
            created_at  TIMESTAMP    NOT NULL DEFAULT now(),
            updated_at  TIMESTAMP    NOT NULL DEFAULT now()
        )
    """)
    op.execute("CREATE INDEX ix_comments_post_id ON comments(post_id)")
    op.execute("CREATE INDEX ix_comments_user_id ON comments(user_id)")
    op.execute("CREATE INDEX ix_comments_created_at ON comments(created_at)")

    op.execute("""
        CREATE TABLE likes (
            id          UUID         PRIMARY KEY,
            post_id     UUID         NOT NULL REFERENCES posts(id) ON DELETE CASCADE,
            user_id     VARCHAR(255) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            created_at  TIMESTAMP    NOT NULL DEFAULT now(),
            CONSTRAINT uq_likes_post_id_user_id UNIQUE (post_id, user_id)
        )
    """)
    op.execute("CREATE INDEX ix_likes_post_id ON likes(post_id)")
    op.execute("CREATE INDEX ix_likes_user_id ON likes(user_id)")
    op.execute("CREATE INDEX ix_likes_created_at ON likes(created_at)")

    op.execute("CREATE TYPE notification_type AS ENUM ('like', 'comment')")
    op.execute("""
        CREATE TABLE notifications (
            id          UUID         PRIMARY KEY,
            user_id     VARCHAR(255) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            type        notification_type NOT NULL,
            message     VARCHAR(500) NOT NULL,
            read        BOOLEAN      NOT NULL DEFAULT false,
            created_at  TIMESTAMP    NOT NULL DEFAULT now()
        )
    """)
    op.execute("CREATE INDEX ix_notifications_user_id ON notifications(user_id)")
    op.execute("CREATE INDEX ix_notifications_user_read ON notifications(user_id, read)")
    op.execute("CREATE INDEX ix_notifications_created_at ON notifications(created_at)")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS notifications")
    op.execute("DROP TYPE IF EXISTS notification_type")
    op.execute("DROP TABLE IF EXISTS likes")
    op.execute("DROP TABLE IF EXISTS comments")
    op.execute("DROP TABLE IF EXISTS posts")
    op.execute("DROP TABLE IF EXISTS users")
