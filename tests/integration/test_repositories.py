"""
Integration tests for the SQLAlchemy repositories.

Runs against an in-memory SQLite database.

Usage:
    pytest tests/integration/test_repositories.py
"""

import pytest
from sqlalchemy import select

from cineshare.domain.entities import (
    Conversation,
    Message,
    Notification,
    Review,
    ReviewReport,
    User,
)
from cineshare.domain.exceptions import ConflictError
from cineshare.domain.value_objects import NotificationType, ReportReason
from cineshare.infrastructure.persistence.models import MessageModel
from cineshare.infrastructure.persistence.repositories import (
    ConversationRepository,
    MessageRepository,
    NotificationRepository,
    ReviewReportRepository,
    ReviewRepository,
    UserRepository,
)


def make_user(username: str) -> User:
    return User(
        email=f"{username}@Example.com",
        username=username,
        password_hash="$argon2id$hash",
    )


async def seed_users(session, *usernames):
    repo = UserRepository(session)
    return [await repo.create(make_user(name)) for name in usernames]


class TestUserRepository:
    """Integration tests for UserRepository."""

    async def test_create_and_lookup(self, db_session):
        repo = UserRepository(db_session)

        user = await repo.create(make_user("ada"))

        assert user.email == "ada@example.com"
        assert (await repo.get_by_id(user.id)).username == "ada"
        assert (await repo.get_by_username("ada")).id == user.id
        assert await repo.get_by_username("nobody") is None

    async def test_email_lookup_case_insensitive(self, db_session):
        repo = UserRepository(db_session)
        user = await repo.create(make_user("ada"))

        found = await repo.get_by_email("ADA@example.COM")

        assert found.id == user.id

    async def test_rotate_refresh_token_id_once(self, test_db):
        """Test two exchanges of the same token ID: only the first swaps it."""
        async with test_db.session() as session:
            (ada,) = await seed_users(session, "ada")
            await UserRepository(session).set_refresh_token_id(ada.id, "jti-1")

        async with test_db.session() as session:
            repo = UserRepository(session)
            assert await repo.rotate_refresh_token_id(ada.id, "jti-1", "jti-2")

        async with test_db.session() as session:
            repo = UserRepository(session)
            assert not await repo.rotate_refresh_token_id(ada.id, "jti-1", "jti-3")
            assert (await repo.get_by_id(ada.id)).refresh_token_id == "jti-2"

    async def test_rotate_after_logout_fails(self, db_session):
        (ada,) = await seed_users(db_session, "ada")
        repo = UserRepository(db_session)

        assert not await repo.rotate_refresh_token_id(ada.id, "jti-1", "jti-2")
        assert (await repo.get_by_id(ada.id)).refresh_token_id is None

    async def test_set_refresh_token_id(self, db_session):
        repo = UserRepository(db_session)
        user = await repo.create(make_user("ada"))

        await repo.set_refresh_token_id(user.id, "jti-1")
        assert (await repo.get_by_id(user.id)).refresh_token_id == "jti-1"

        await repo.set_refresh_token_id(user.id, None)
        assert (await repo.get_by_id(user.id)).refresh_token_id is None

    async def test_duplicate_username_conflicts(self, test_db):
        async with test_db.session() as session:
            await UserRepository(session).create(make_user("ada"))

        with pytest.raises(ConflictError):
            async with test_db.session() as session:
                await UserRepository(session).create(
                    User(email="other@example.com", username="ada", password_hash="x")
                )


class TestConversationRepository:
    """Integration tests for conversations and messages."""

    async def test_reserve_sequence_increments(self, db_session):
        ada, bob = await seed_users(db_session, "ada", "bob")
        repo = ConversationRepository(db_session)
        first, second = sorted([ada.id, bob.id])
        conversation = await repo.create(
            Conversation(participant_one_id=first, participant_two_id=second)
        )

        for expected in (1, 2, 3):
            conversation = await repo.reserve_sequence(conversation, f"message {expected}")
            assert conversation.last_sequence == expected

        stored = await repo.get_by_participants(first, second)
        assert stored.id == conversation.id
        assert stored.last_sequence == 3
        assert stored.last_message == "message 3"

    async def test_create_for_existing_pair_returns_it(self, test_db):
        """Test a second create for the same pair yields the stored conversation."""
        async with test_db.session() as session:
            ada, bob = await seed_users(session, "ada", "bob")
            first, second = sorted([ada.id, bob.id])
            original = await ConversationRepository(session).create(
                Conversation(participant_one_id=first, participant_two_id=second)
            )

        async with test_db.session() as session:
            repo = ConversationRepository(session)
            duplicate = await repo.create(
                Conversation(participant_one_id=first, participant_two_id=second)
            )
            assert duplicate.id == original.id

            # The session is still usable after the conflict
            updated = await repo.reserve_sequence(duplicate, "first!")
            assert updated.last_sequence == 1

        async with test_db.session() as session:
            stored = await ConversationRepository(session).get_by_participants(
                first, second
            )
            assert stored.last_sequence == 1

    async def test_get_by_participants_is_ordered(self, db_session):
        ada, bob = await seed_users(db_session, "ada", "bob")
        repo = ConversationRepository(db_session)
        first, second = sorted([ada.id, bob.id])
        await repo.create(Conversation(participant_one_id=first, participant_two_id=second))

        assert await repo.get_by_participants(first, second) is not None
        assert await repo.get_by_participants(second, first) is None

    async def test_mark_read_only_touches_recipient(self, db_session):
        ada, bob = await seed_users(db_session, "ada", "bob")
        conversations = ConversationRepository(db_session)
        messages = MessageRepository(db_session)
        first, second = sorted([ada.id, bob.id])
        conversation = await conversations.create(
            Conversation(participant_one_id=first, participant_two_id=second)
        )

        for sender, recipient in [(ada, bob), (ada, bob), (bob, ada)]:
            conversation = await conversations.reserve_sequence(conversation, "hi")
            await messages.create(
                Message(
                    conversation_id=conversation.id,
                    sender_id=sender.id,
                    recipient_id=recipient.id,
                    content="hi",
                    sequence=conversation.last_sequence,
                )
            )

        assert await messages.mark_read(conversation.id, bob.id) == 2
        assert await messages.mark_read(conversation.id, bob.id) == 0

        rows = await db_session.execute(
            select(MessageModel.sequence, MessageModel.read)
            .where(MessageModel.conversation_id == conversation.id)
            .order_by(MessageModel.sequence)
        )
        assert rows.all() == [(1, True), (2, True), (3, False)]


class TestNotificationRepository:
    """Integration tests for NotificationRepository."""

    async def test_read_state(self, db_session):
        ada, bob = await seed_users(db_session, "ada", "bob")
        repo = NotificationRepository(db_session)
        created = []
        for kind in (NotificationType.LIKE, NotificationType.FOLLOW, NotificationType.COMMENT):
            created.append(
                await repo.create(
                    Notification(
                        user_id=bob.id,
                        type=kind,
                        actor_id=ada.id,
                        actor_name="ada",
                        message=f"ada {kind.value}",
                    )
                )
            )

        await repo.mark_read(created[0].id)

        assert (await repo.get_by_id(created[0].id)).read is True
        assert len(await repo.list_for_user(bob.id, unread_only=True)) == 2
        assert await repo.mark_all_read(bob.id) == 2
        assert await repo.list_for_user(bob.id, unread_only=True) == []
        assert len(await repo.list_for_user(bob.id)) == 3
        assert await repo.list_for_user(ada.id) == []


class TestReviewReportRepository:
    """Integration tests for review reports."""

    async def test_one_report_per_user_and_review(self, test_db):
        async with test_db.session() as session:
            ada, carol = await seed_users(session, "ada", "carol")
            review = await ReviewRepository(session).create(
                Review(author_id=carol.id, movie_id=603, content="Great", rating=9)
            )
            report = await ReviewReportRepository(session).create(
                ReviewReport(
                    user_id=ada.id, review_id=review.id, reason=ReportReason.SPOILERS
                )
            )

        async with test_db.session() as session:
            found = await ReviewReportRepository(session).get_by_user_and_review(
                ada.id, review.id
            )
            assert found.id == report.id
            assert found.reason == ReportReason.SPOILERS

        with pytest.raises(ConflictError):
            async with test_db.session() as session:
                await ReviewReportRepository(session).create(
                    ReviewReport(
                        user_id=ada.id, review_id=review.id, reason=ReportReason.SPAM
                    )
                )
