"""
Game Reviews API — Review Service Unit Tests
==============================================

What:  ReviewService validation, error mapping and lookup orchestration.
How:   The store is an AsyncMock (see conftest.mock_store); no database.

What we test:
    ✅ review_id token parsing
    ✅ tagged lookup → exception mapping
    ✅ comment body validation order and messages
    ✅ concurrent comments/review lookup: 200 vs 404, first error wins
    ✅ comment creation only reaches the store once every check passed
"""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest

from gamereviews.exceptions import DatabaseError, NotFoundError, ValidationError
from gamereviews.schemas.review import LookupStatus, ReviewLookup
from gamereviews.schemas.user import UserItem
from gamereviews.services.review_service import ReviewService, parse_review_id


def _payload(body):
    """Body reader that hands back an already-decoded JSON value."""
    return AsyncMock(return_value=body)


class TestParseReviewId:

    @pytest.mark.parametrize("token, expected", [
        ("1", 1),
        ("100", 100),
        ("0", 0),
        ("-3", -3),
        ("2147483647", 2147483647),
    ])
    def test_integer_tokens(self, token, expected):
        assert parse_review_id(token) == expected

    @pytest.mark.parametrize("token", [
        "abc", "", "1.5", "1e3", " 1", "0x10", "2147483648", "-2147483649",
    ])
    def test_rejected_tokens(self, token):
        assert parse_review_id(token) is None

    def test_bool_is_not_an_id(self):
        assert parse_review_id(True) is None


class TestRequireReview:

    def test_found_unwraps_review(self, sample_review):
        assert ReviewService.require_review(ReviewLookup.found(sample_review)) is sample_review

    def test_not_found_raises_with_requested_id(self):
        with pytest.raises(NotFoundError) as excinfo:
            ReviewService.require_review(ReviewLookup.not_found(100))
        assert excinfo.value.message == "Review ID: 100 Not Found"

    def test_invalid_id_raises_bad_request(self):
        with pytest.raises(ValidationError) as excinfo:
            ReviewService.require_review(ReviewLookup.invalid_id("abc"))
        assert excinfo.value.message == "Bad Request"
        assert excinfo.value.field == "review_id"


class TestLookupAndGetReview:

    @pytest.mark.asyncio
    async def test_malformed_id_never_reaches_store(self, mock_store):
        service = ReviewService(store=mock_store)
        lookup = await service.lookup_review("abc")

        assert lookup.status is LookupStatus.INVALID_ID
        assert lookup.requested_id == "abc"
        mock_store.fetch_review_by_id.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_get_review_returns_envelope(self, mock_store, sample_review):
        mock_store.fetch_review_by_id.return_value = ReviewLookup.found(sample_review)
        service = ReviewService(store=mock_store)

        result = await service.get_review("1")

        assert result.review.review_id == 1
        mock_store.fetch_review_by_id.assert_awaited_once_with(1)

    @pytest.mark.asyncio
    async def test_get_review_missing_raises_not_found(self, mock_store):
        mock_store.fetch_review_by_id.return_value = ReviewLookup.not_found(100)
        service = ReviewService(store=mock_store)

        with pytest.raises(NotFoundError, match="Review ID: 100 Not Found"):
            await service.get_review("100")

    @pytest.mark.asyncio
    async def test_not_found_echoes_token_as_sent(self, mock_store):
        mock_store.fetch_review_by_id.return_value = ReviewLookup.not_found(100)
        service = ReviewService(store=mock_store)

        with pytest.raises(NotFoundError) as excinfo:
            await service.get_review("0100")

        assert excinfo.value.message == "Review ID: 0100 Not Found"
        mock_store.fetch_review_by_id.assert_awaited_once_with(100)


class TestValidateCommentPayload:

    def test_valid_payload_builds_typed_input(self):
        comment_in = ReviewService.validate_comment_payload(
            {"username": "mallionaire", "body": "This is a test!", "extra": 1}
        )
        assert comment_in.username == "mallionaire"
        assert comment_in.body == "This is a test!"

    @pytest.mark.parametrize("payload, message", [
        ({"body": "text"}, "Bad Request: Missing username property"),
        ({"username": "mallionaire"}, "Bad Request: Missing body property"),
        ({"username": 100, "body": "text"}, "Bad Request: Incorrect data type on username"),
        ({"username": "mallionaire", "body": True}, "Bad Request: Incorrect data type on body"),
        ({"username": None, "body": "text"}, "Bad Request: Incorrect data type on username"),
    ])
    def test_each_rule_has_its_message(self, payload, message):
        with pytest.raises(ValidationError) as excinfo:
            ReviewService.validate_comment_payload(payload)
        assert excinfo.value.message == message

    def test_presence_is_checked_before_type(self):
        # username has the wrong type AND body is missing: missing wins
        with pytest.raises(ValidationError, match="Missing body property"):
            ReviewService.validate_comment_payload({"username": 100})

    def test_username_type_checked_before_body_type(self):
        with pytest.raises(ValidationError, match="Incorrect data type on username"):
            ReviewService.validate_comment_payload({"username": 1, "body": 2})

    @pytest.mark.parametrize("payload", [None, [], "text", 42])
    def test_non_object_body_is_treated_as_empty(self, payload):
        with pytest.raises(ValidationError, match="Missing username property"):
            ReviewService.validate_comment_payload(payload)


class TestListComments:

    @pytest.mark.asyncio
    async def test_existing_review_without_comments_is_empty(self, mock_store, sample_review):
        mock_store.fetch_comments_by_review_id.return_value = []
        mock_store.fetch_review_by_id.return_value = ReviewLookup.found(sample_review)
        service = ReviewService(store=mock_store)

        result = await service.list_comments("1")

        assert result.comments == []

    @pytest.mark.asyncio
    async def test_missing_review_is_not_found_even_with_empty_comments(self, mock_store):
        mock_store.fetch_comments_by_review_id.return_value = []
        mock_store.fetch_review_by_id.return_value = ReviewLookup.not_found(100)
        service = ReviewService(store=mock_store)

        with pytest.raises(NotFoundError, match="Review ID: 100 Not Found"):
            await service.list_comments("100")

    @pytest.mark.asyncio
    async def test_malformed_id_skips_both_lookups(self, mock_store):
        service = ReviewService(store=mock_store)

        with pytest.raises(ValidationError) as excinfo:
            await service.list_comments("abc")

        assert excinfo.value.message == "Bad Request"
        assert excinfo.value.field == "review_id"

        mock_store.fetch_comments_by_review_id.assert_not_awaited()
        mock_store.fetch_review_by_id.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_lookups_run_concurrently(self, mock_store, sample_review, sample_comment):
        both_started = asyncio.Event()
        started = []

        async def fetch_comments(review_id):
            started.append("comments")
            if len(started) == 2:
                both_started.set()
            await asyncio.wait_for(both_started.wait(), timeout=1)
            return [sample_comment]

        async def fetch_review(review_id):
            started.append("review")
            if len(started) == 2:
                both_started.set()
            await asyncio.wait_for(both_started.wait(), timeout=1)
            return ReviewLookup.found(sample_review)

        mock_store.fetch_comments_by_review_id.side_effect = fetch_comments
        mock_store.fetch_review_by_id.side_effect = fetch_review
        service = ReviewService(store=mock_store)

        result = await service.list_comments("1")

        assert sorted(started) == ["comments", "review"]
        assert result.comments == [sample_comment]

    @pytest.mark.asyncio
    async def test_store_failure_propagates(self, mock_store, sample_review):
        mock_store.fetch_comments_by_review_id.side_effect = DatabaseError(
            context={"operation": "fetch_comments_by_review_id"}
        )
        mock_store.fetch_review_by_id.return_value = ReviewLookup.found(sample_review)
        service = ReviewService(store=mock_store)

        with pytest.raises(DatabaseError):
            await service.list_comments("1")


class TestCreateComment:

    @pytest.mark.asyncio
    async def test_success_inserts_and_returns_comment(
        self, mock_store, sample_review, sample_comment
    ):
        mock_store.fetch_review_by_id.return_value = ReviewLookup.found(sample_review)
        mock_store.fetch_user_by_username.return_value = UserItem(
            username="mallionaire", name="haz", avatar_url=""
        )
        mock_store.insert_comment.return_value = sample_comment
        service = ReviewService(store=mock_store)

        result = await service.create_comment(
            "1", _payload({"username": "mallionaire", "body": "This is a test!"})
        )

        assert result.comment == sample_comment
        mock_store.insert_comment.assert_awaited_once_with(
            review_id=1, username="mallionaire", body="This is a test!"
        )

    @pytest.mark.asyncio
    async def test_missing_review_checked_before_body(self, mock_store):
        mock_store.fetch_review_by_id.return_value = ReviewLookup.not_found(100)
        service = ReviewService(store=mock_store)

        read_payload = _payload({})
        with pytest.raises(NotFoundError, match="Review ID: 100 Not Found"):
            await service.create_comment("100", read_payload)

        read_payload.assert_not_awaited()
        mock_store.insert_comment.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_review_wins_over_undecodable_body(self, mock_store):
        mock_store.fetch_review_by_id.return_value = ReviewLookup.not_found(100)
        service = ReviewService(store=mock_store)
        read_payload = AsyncMock(side_effect=json.JSONDecodeError("Expecting value", "{x", 1))

        with pytest.raises(NotFoundError, match="Review ID: 100 Not Found"):
            await service.create_comment("100", read_payload)

    @pytest.mark.asyncio
    async def test_undecodable_body_is_bad_request(self, mock_store, sample_review):
        mock_store.fetch_review_by_id.return_value = ReviewLookup.found(sample_review)
        service = ReviewService(store=mock_store)
        read_payload = AsyncMock(side_effect=json.JSONDecodeError("Expecting value", "{x", 1))

        with pytest.raises(ValidationError) as excinfo:
            await service.create_comment("1", read_payload)

        assert excinfo.value.message == "Bad Request"
        mock_store.insert_comment.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_malformed_id_checked_first(self, mock_store):
        service = ReviewService(store=mock_store)

        with pytest.raises(ValidationError) as excinfo:
            await service.create_comment("abc", _payload({"username": 1}))

        assert excinfo.value.message == "Bad Request"
        mock_store.fetch_review_by_id.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_body_never_inserts(self, mock_store, sample_review):
        mock_store.fetch_review_by_id.return_value = ReviewLookup.found(sample_review)
        service = ReviewService(store=mock_store)

        with pytest.raises(ValidationError, match="Incorrect data type on body"):
            await service.create_comment("1", _payload({"username": "mallionaire", "body": 5}))

        mock_store.fetch_user_by_username.assert_not_awaited()
        mock_store.insert_comment.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_user_is_not_found(self, mock_store, sample_review):
        mock_store.fetch_review_by_id.return_value = ReviewLookup.found(sample_review)
        mock_store.fetch_user_by_username.return_value = None
        service = ReviewService(store=mock_store)

        with pytest.raises(NotFoundError) as excinfo:
            await service.create_comment("1", _payload({"username": "ghost", "body": "boo"}))

        assert excinfo.value.message == "Username: ghost Not Found"
        mock_store.insert_comment.assert_not_awaited()
