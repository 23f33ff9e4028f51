"""
Tests for the post and taxonomy services.
"""

from uuid import uuid4

import pytest

from postguard.core.exceptions import NotFound, ValidationError
from postguard.repositories import PostRepository, PostTagRepository
from postguard.schemas import PostResponse


async def count_links(db, post_id) -> int:
    return await PostRepository(db).count_tag_links(post_id)


@pytest.mark.asyncio
async def test_create_post(factory, s1):
    category = await factory.category("Tutorials")
    tags = [await factory.tag("rails"), await factory.tag("rolify")]

    post = await factory.post(s1, category=category, tags=tags)

    assert post.id is not None
    assert post.user_id == s1.id
    assert post.category.name == "Tutorials"
    assert sorted(tag.name for tag in post.tags) == ["rails", "rolify"]


@pytest.mark.asyncio
async def test_post_response_from_model(r1):
    response = PostResponse.model_validate(r1)

    assert response.id == r1.id
    assert response.title == r1.title
    assert response.user_id == r1.user_id
    assert r1.to_dict()["category_id"] == response.category_id


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "field",
    ["title", "body", "published_at", "user_id", "category_id"],
)
async def test_create_requires_field(factory, s1, field):
    """Each required field missing on its own is a validation failure."""
    category = await factory.category()
    data = factory.post_data(s1, category)
    del data[field]

    with pytest.raises(ValidationError) as exc_info:
        await factory.posts.create(data)

    assert exc_info.value.fields == [field]


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["title", "body"])
async def test_create_rejects_blank_text(factory, s1, field):
    category = await factory.category()

    with pytest.raises(ValidationError) as exc_info:
        await factory.posts.create(factory.post_data(s1, category, **{field: "   "}))

    assert exc_info.value.fields == [field]


@pytest.mark.asyncio
async def test_create_reports_every_missing_field(factory):
    with pytest.raises(ValidationError) as exc_info:
        await factory.posts.create({"title": None})

    assert exc_info.value.fields == [
        "body", "category_id", "published_at", "title", "user_id",
    ]


@pytest.mark.asyncio
async def test_create_with_unknown_category(factory, s1):
    category = await factory.category()
    data = factory.post_data(s1, category, category_id=uuid4())

    with pytest.raises(NotFound) as exc_info:
        await factory.posts.create(data)

    assert exc_info.value.entity == "Category"


@pytest.mark.asyncio
async def test_create_with_unknown_owner(factory, s1):
    category = await factory.category()

    with pytest.raises(NotFound) as exc_info:
        await factory.posts.create(factory.post_data(s1, category, user_id=uuid4()))

    assert exc_info.value.entity == "User"


@pytest.mark.asyncio
async def test_create_with_unknown_tag(factory, s1):
    category = await factory.category()
    data = factory.post_data(s1, category, tag_ids=[uuid4()])

    with pytest.raises(NotFound) as exc_info:
        await factory.posts.create(data)

    assert exc_info.value.entity == "Tag"


@pytest.mark.asyncio
async def test_update_post(factory, r1):
    updated = await factory.posts.update(r1.id, {"title": "Renamed"})

    assert updated.title == "Renamed"
    assert updated.body == r1.body


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["title", "body", "published_at", "category_id"])
async def test_update_cannot_clear_required_field(factory, r1, field):
    with pytest.raises(ValidationError) as exc_info:
        await factory.posts.update(r1.id, {field: None})

    assert exc_info.value.fields == [field]


@pytest.mark.asyncio
async def test_update_rejects_empty_title(factory, r1):
    with pytest.raises(ValidationError) as exc_info:
        await factory.posts.update(r1.id, {"title": ""})

    assert exc_info.value.fields == ["title"]


@pytest.mark.asyncio
async def test_update_replaces_tags(db, factory, r1):
    kept = next(tag for tag in r1.tags if tag.name == "rails")
    added = await factory.tag("devise")

    updated = await factory.posts.update(r1.id, {"tag_ids": [kept.id, added.id]})

    assert sorted(tag.name for tag in updated.tags) == ["devise", "rails"]
    assert await count_links(db, r1.id) == 2


@pytest.mark.asyncio
async def test_update_missing_post(factory):
    with pytest.raises(NotFound):
        await factory.posts.update(uuid4(), {"title": "x"})


@pytest.mark.asyncio
async def test_delete_removes_tag_links(db, factory, r1):
    assert await count_links(db, r1.id) == 2

    await factory.posts.delete(r1.id)

    assert await count_links(db, r1.id) == 0
    with pytest.raises(NotFound):
        await factory.posts.get(r1.id)


@pytest.mark.asyncio
async def test_delete_leaves_other_posts_links(db, factory, s1, r1):
    tag = await factory.tag("shared")
    other = await factory.post(s1, tags=[tag])

    await factory.posts.delete(r1.id)

    assert await count_links(db, other.id) == 1
    assert await PostTagRepository(db).count() == 1


@pytest.mark.asyncio
async def test_delete_missing_post(factory):
    with pytest.raises(NotFound):
        await factory.posts.delete(uuid4())


@pytest.mark.asyncio
async def test_list_posts(factory, s1, s2, r1):
    await factory.post(s2)

    assert [post.id for post in await factory.posts.list_for(s1.id)] == [r1.id]
    assert len(await factory.posts.list_all()) == 2


# ============ Taxonomy ============


@pytest.mark.asyncio
async def test_duplicate_category_rejected(factory):
    await factory.category("News")

    with pytest.raises(ValidationError):
        await factory.category("News")


@pytest.mark.asyncio
async def test_blank_tag_rejected(factory):
    with pytest.raises(ValidationError) as exc_info:
        await factory.taxonomy.create_tag("  ")

    assert exc_info.value.fields == ["name"]


@pytest.mark.asyncio
async def test_get_or_create_tags(factory):
    existing = await factory.tag("python")

    tags = await factory.taxonomy.get_or_create_tags(["python", "sqlalchemy", "python"])

    assert [tag.name for tag in tags] == ["python", "sqlalchemy"]
    assert tags[0].id == existing.id


@pytest.mark.asyncio
async def test_get_missing_taxonomy(factory):
    with pytest.raises(NotFound):
        await factory.taxonomy.get_category(uuid4())
    with pytest.raises(NotFound):
        await factory.taxonomy.get_tag(uuid4())
