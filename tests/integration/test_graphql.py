"""
Integration Tests - GraphQL Schema
"""
import pytest

from marketplace.serving.api.graphql import GraphQLContext, schema


@pytest.fixture
def context(seeded, test_settings) -> GraphQLContext:
    return GraphQLContext(database=seeded, settings=test_settings)


async def run(query: str, context: GraphQLContext, **variables):
    return await schema.execute(query, variable_values=variables or None, context_value=context)


class TestQueries:
    """Tests for query fields through the schema"""

    async def test_user_by_id(self, context):
        result = await run("{ getUserById(id: 1) { username role createdAt productCount } }", context)

        assert result.errors is None
        assert result.data["getUserById"] == {
            "username": "alice",
            "role": "ADMIN",
            "createdAt": "2024-01-01T00:00:00.000Z",
            "productCount": 3,
        }

    async def test_user_language_with_speakers(self, context):
        result = await run("{ getUserLanguage(userId: 1) { code name users { username } } }", context)

        assert result.errors is None
        assert result.data["getUserLanguage"] == [
            {"code": "en", "name": "English", "users": [{"username": "alice"}, {"username": "bob"}]},
            {"code": "fr", "name": "French", "users": [{"username": "alice"}]},
        ]

    async def test_user_type_has_no_password(self, context):
        result = await run("{ getUserById(id: 1) { password } }", context)
        assert result.errors

    async def test_not_found_carries_code(self, context):
        result = await run("{ getProductById(id: 999) { id } }", context)

        assert result.data is None
        assert result.errors[0].message == "Product with id 999 not found"
        assert result.errors[0].extensions["code"] == "NOT_FOUND"

    async def test_raffle_statistics_and_entries(self, context):
        result = await run(
            """
            {
              getRaffleStatistics(raffleId: 42) { totalEntries won lost pending }
              getRaffleById(id: 42) { title entries { result } }
              getRaffleWinners(raffleId: 42) { userId }
            }
            """,
            context,
        )

        assert result.errors is None
        assert result.data["getRaffleStatistics"] == {"totalEntries": 3, "won": 2, "lost": 1, "pending": 0}
        assert [e["result"] for e in result.data["getRaffleById"]["entries"]] == ["WON", "LOST", "WON"]
        assert [w["userId"] for w in result.data["getRaffleWinners"]] == [2, 4]

    async def test_profit_margin_ranking(self, context):
        result = await run(
            "{ getProductsByProfitMargin(minMargin: 0.5) { margin product { id seller { username } } } }",
            context,
        )

        assert result.errors is None
        rows = result.data["getProductsByProfitMargin"]
        assert [r["product"]["id"] for r in rows] == [10]
        assert rows[0]["margin"] == pytest.approx(1.0)
        assert rows[0]["product"]["seller"]["username"] == "alice"

    async def test_feedback_summary_and_sentiment(self, context):
        result = await run(
            """
            {
              getProductFeedbackSummary(productId: 10) { totalReviews averageRating positive negative neutral }
              getReviewSentiment(reviewId: 100)
              getProductReviews(productId: 10) { sentiment }
            }
            """,
            context,
        )

        assert result.errors is None
        assert result.data["getProductFeedbackSummary"] == {
            "totalReviews": 3,
            "averageRating": 50.0,
            "positive": 1,
            "negative": 1,
            "neutral": 1,
        }
        assert result.data["getReviewSentiment"] == "POSITIVE"
        assert [r["sentiment"] for r in result.data["getProductReviews"]] == ["POSITIVE", "NEGATIVE", "NEUTRAL"]

    async def test_date_range_variables(self, context):
        result = await run(
            """
            query Sales($start: DateTime!, $end: DateTime!) {
              getSalesByDateRange(startDate: $start, endDate: $end) { id soldAt }
              getDailySales(startDate: $start, endDate: $end) { date revenue saleCount }
            }
            """,
            context,
            start="2024-05-01T10:00:00Z",
            end="2024-05-03T12:00:00Z",
        )

        assert result.errors is None
        assert [s["id"] for s in result.data["getSalesByDateRange"]] == [200, 201, 202, 203]
        assert result.data["getSalesByDateRange"][0]["soldAt"] == "2024-05-01T10:00:00.000Z"
        assert result.data["getDailySales"][0] == {"date": 1714521600000, "revenue": 600.0, "saleCount": 2}

    async def test_inverted_range_is_invalid_argument(self, context):
        result = await run(
            '{ getSalesSummary(startDate: "2024-05-03T00:00:00Z", endDate: "2024-05-01T00:00:00Z") { saleCount } }',
            context,
        )
        assert result.errors[0].extensions["code"] == "INVALID_ARGUMENT"

    async def test_unparseable_datetime_variable(self, context):
        result = await run(
            "query Q($d: DateTime!) { getReviewsByDateRange(startDate: $d, endDate: $d) { id } }",
            context,
            d="not-a-date",
        )

        assert result.errors
        assert result.errors[0].extensions["code"] == "INVALID_ARGUMENT"

    async def test_negative_limit_rejected(self, context):
        result = await run("{ getRecentProducts(limit: -1) { id } }", context)
        assert result.errors[0].extensions["code"] == "INVALID_ARGUMENT"

    async def test_role_queries(self, context):
        result = await run(
            "{ getAllRoles getUserRoles(userId: 999) getUserRoleStatistics getAdminUsers { username } }",
            context,
        )

        assert result.errors is None
        assert set(result.data["getAllRoles"]) == {"ADMIN", "MODERATOR", "USER"}
        assert result.data["getUserRoles"] == []
        assert ["USER", "2"] in result.data["getUserRoleStatistics"]
        assert result.data["getAdminUsers"] == [{"username": "alice"}]

    async def test_user_achievements_json_criteria(self, context):
        result = await run("{ getUserAchievements(userId: 1) { achievement { name criteria } } }", context)

        assert result.errors is None
        assert result.data["getUserAchievements"][0]["achievement"] == {
            "name": "First Sale",
            "criteria": {"sales": 1},
        }


class TestCreateUserMutation:
    """Tests for the createUser mutation"""

    MUTATION = """
        mutation Create($input: CreateUserInput!) {
          createUser(input: $input) { id username role }
        }
    """

    async def test_create_moderator(self, context):
        result = await run(
            self.MUTATION,
            context,
            input={"email": "mod@example.com", "username": "mod", "password": "pw", "phrase": "keep-it-civil"},
        )

        assert result.errors is None
        assert result.data["createUser"]["role"] == "MODERATOR"

    async def test_wrong_phrase_is_policy_violation(self, context):
        result = await run(
            self.MUTATION,
            context,
            input={"email": "x@example.com", "username": "x", "password": "pw", "phrase": "guess"},
        )

        assert result.errors[0].message == "Invalid phrase for admin or moderator role."
        assert result.errors[0].extensions["code"] == "POLICY_VIOLATION"

    async def test_duplicate_email_is_data_access_error(self, context):
        result = await run(
            self.MUTATION,
            context,
            input={"email": "alice@example.com", "username": "alice2", "password": "pw"},
        )

        assert result.errors[0].extensions["code"] == "DATA_ACCESS_ERROR"
