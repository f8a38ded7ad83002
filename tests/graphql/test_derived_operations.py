"""
Integration tests for the derived per-table queries and mutations
"""

import pytest
from sqlalchemy import func, select

from inkwell.dbmodels import Comments, Posts, Users

pytestmark = [pytest.mark.integration, pytest.mark.requires_db, pytest.mark.asyncio]


async def count_rows(database, model) -> int:
    async with database.session() as session:
        return (await session.execute(select(func.count()).select_from(model))).scalar_one()


class TestDerivedQueries:
    async def test_single_returns_first_match(self, execute):
        result = await execute("{ usersSingle(where: {age: {gt: 40}}) { id name } }")

        assert result.errors is None
        assert result.data["usersSingle"] == {"id": 2, "name": "Alan"}

    async def test_single_without_match_is_null(self, execute):
        result = await execute("{ usersSingle(where: {id: {eq: 999}}) { id } }")

        assert result.errors is None
        assert result.data["usersSingle"] is None

    async def test_single_offset(self, execute):
        result = await execute("{ postsSingle(offset: 2) { id } }")

        assert result.errors is None
        assert result.data["postsSingle"] == {"id": 12}

    async def test_order_by_direction(self, execute):
        result = await execute("{ users(orderBy: {age: {direction: desc, priority: 1}}) { id } }")

        assert result.errors is None
        assert [u["id"] for u in result.data["users"]] == [3, 2, 1]

    async def test_paging_follows_explicit_order(self, execute):
        result = await execute(
            """
            {
              posts(
                orderBy: {
                  title: {direction: asc, priority: 2}
                  id: {direction: desc, priority: 1}
                }
                limit: 2
                offset: 1
              ) { id }
            }
            """
        )

        assert result.errors is None
        assert [p["id"] for p in result.data["posts"]] == [10, 12]

    async def test_single_offset_follows_explicit_order(self, execute):
        result = await execute(
            "{ postsSingle(orderBy: {id: {direction: desc, priority: 1}}, offset: 1) { id } }"
        )

        assert result.errors is None
        assert result.data["postsSingle"] == {"id": 11}

    @pytest.mark.parametrize(
        ("where", "expected"),
        [
            ("{age: {lte: 41}}", [1, 2]),
            ("{age: {ne: 41}}", [1, 3]),
            ("{id: {inArray: [1, 3]}}", [1, 3]),
            ("{id: {notInArray: [1, 3]}}", [2]),
            ('{name: {like: "A%"}}', [1, 2]),
            ('{email: {ilike: "GRACE%"}}', [3]),
            ("{age: {gte: 36, lt: 85}}", [1, 2]),
            ("{email: {isNull: false}}", [1, 2, 3]),
            ("{email: {isNull: true}}", []),
        ],
    )
    async def test_column_filter_operators(self, execute, where, expected):
        """Operators apply through updates, which return every matched row."""
        result = await execute(f"mutation {{ updateUsers(set: {{}}, where: {where}) {{ id }} }}")

        assert result.errors is None
        assert [u["id"] for u in result.data["updateUsers"]] == expected

    async def test_derived_types_are_exposed(self, execute):
        result = await execute('{ __type(name: "UsersFilters") { inputFields { name } } }')

        assert result.errors is None
        names = {f["name"] for f in result.data["__type"]["inputFields"]}
        assert names == {"id", "name", "age", "email"}


class TestInsertMutations:
    async def test_insert_single_assigns_identity(self, execute, database):
        result = await execute(
            """
            mutation {
              insertIntoUsersSingle(values: {name: "Edsger", age: 72, email: "ew@example.com"}) {
                id
                name
              }
            }
            """
        )

        assert result.errors is None
        created = result.data["insertIntoUsersSingle"]
        assert created["name"] == "Edsger"
        assert created["id"] > 3
        assert await count_rows(database, Users) == 4

    async def test_insert_many(self, execute, database):
        result = await execute(
            """
            mutation ($values: [CommentsInsertInput!]!) {
              insertIntoComments(values: $values) { postId ownerId content }
            }
            """,
            {
                "values": [
                    {"content": "One", "postId": 11, "ownerId": 2},
                    {"content": "Two", "postId": 11, "ownerId": 3},
                ]
            },
        )

        assert result.errors is None
        assert [c["content"] for c in result.data["insertIntoComments"]] == ["One", "Two"]
        assert await count_rows(database, Comments) == 5

    async def test_duplicate_email_is_rejected_and_nothing_is_written(self, execute, database):
        result = await execute(
            """
            mutation {
              insertIntoUsersSingle(values: {name: "Ada 2", age: 20, email: "ada@example.com"}) {
                id
              }
            }
            """
        )

        assert result.errors is not None
        assert result.errors[0].path == ["insertIntoUsersSingle"]
        assert "Cannot insert into users" in result.errors[0].message
        assert await count_rows(database, Users) == 3

    async def test_duplicate_in_batch_rolls_back_whole_batch(self, execute, database):
        result = await execute(
            """
            mutation {
              insertIntoUsers(values: [
                {name: "New", age: 1, email: "new@example.com"},
                {name: "Dup", age: 2, email: "alan@example.com"}
              ]) { id }
            }
            """
        )

        assert result.errors is not None
        assert await count_rows(database, Users) == 3

    async def test_unknown_author_is_rejected(self, execute, database):
        result = await execute(
            """
            mutation {
              insertIntoPostsSingle(values: {title: "t", content: "c", userId: 999}) { id }
            }
            """
        )

        assert result.errors is not None
        assert result.errors[0].path == ["insertIntoPostsSingle"]
        assert "Cannot insert into posts" in result.errors[0].message
        assert await count_rows(database, Posts) == 3

    async def test_missing_required_column_is_a_validation_error(self, execute, statements):
        result = await execute('mutation { insertIntoUsersSingle(values: {name: "X"}) { id } }')

        assert result.errors is not None
        assert result.data is None
        assert statements.statements == []


class TestUpdateAndDeleteMutations:
    async def test_update_changes_only_matching_rows(self, execute):
        result = await execute(
            'mutation { updatePosts(set: {title: "Renamed"}, where: {userId: {eq: 1}}) '
            "{ id title } }"
        )

        assert result.errors is None
        assert result.data["updatePosts"] == [
            {"id": 10, "title": "Renamed"},
            {"id": 11, "title": "Renamed"},
        ]

        check = await execute("{ postsSingle(where: {id: {eq: 12}}) { title } }")
        assert check.data["postsSingle"] == {"title": "Machines"}

    async def test_update_to_duplicate_email_fails(self, execute, database):
        result = await execute(
            'mutation { updateUsers(set: {email: "ada@example.com"}, where: {id: {eq: 2}}) { id } }'
        )

        assert result.errors is not None
        async with database.session() as session:
            email = (await session.execute(select(Users.email).where(Users.id == 2))).scalar_one()
        assert email == "alan@example.com"

    async def test_delete_returns_removed_rows(self, execute, database):
        result = await execute(
            "mutation { deleteFromComments(where: {postId: {eq: 10}}) { id content } }"
        )

        assert result.errors is None
        assert result.data["deleteFromComments"] == [
            {"id": 100, "content": "Nice"},
            {"id": 101, "content": "Thanks"},
        ]
        assert await count_rows(database, Comments) == 1

    async def test_delete_cascades_to_dependent_rows(self, execute, database):
        result = await execute("mutation { deleteFromUsers(where: {id: {eq: 1}}) { id } }")

        assert result.errors is None
        assert result.data["deleteFromUsers"] == [{"id": 1}]
        assert await count_rows(database, Users) == 2
        # Posts 10 and 11 go with their author, comments 100 and 101 with post 10
        assert await count_rows(database, Posts) == 1
        assert await count_rows(database, Comments) == 1

    async def test_delete_without_match_is_empty(self, execute, database):
        result = await execute("mutation { deleteFromComments(where: {id: {eq: 999}}) { id } }")

        assert result.errors is None
        assert result.data["deleteFromComments"] == []
        assert await count_rows(database, Comments) == 3


class TestValidation:
    async def test_unknown_field_returns_error_without_storage_access(self, execute, statements):
        result = await execute("{ users { id nonexistent } }")

        assert result.data is None
        assert result.errors is not None
        assert "nonexistent" in result.errors[0].message
        assert statements.statements == []

    async def test_argument_type_mismatch_is_rejected(self, execute, statements):
        result = await execute('{ users(where: {id: "not-a-number"}) { id } }')

        assert result.data is None
        assert result.errors is not None
        assert statements.statements == []
