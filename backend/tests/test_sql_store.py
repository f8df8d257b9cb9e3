import pytest

from quickquiz.importers import QuestionImporter, TagImporter, TopicImporter
from quickquiz.models.question import Question, QuestionTopic
from quickquiz.services.content_store import ContentStoreError, EntityKind


def test_create_and_find_topic(sql_store):
    created = sql_store.create(EntityKind.topic, {"name": "Geography", "description": None})

    assert created["document_id"]
    assert sql_store.find(EntityKind.topic, {"name": "Geography"}) == [created]
    assert sql_store.find(EntityKind.topic, {"name": "geography"}) == []
    assert sql_store.find_published(EntityKind.topic) == [created]


def test_unpublished_rows_are_not_listed(sql_store, db):
    db.add(QuestionTopic(name="Draft"))
    db.commit()

    assert sql_store.find(EntityKind.topic, {"name": "Draft"})
    assert sql_store.find_published(EntityKind.topic) == []


def test_tag_lookup_by_slug(sql_store):
    sql_store.create(EntityKind.tag, {"name": "Beginner Friendly", "slug": "beginner-friendly"})

    found = sql_store.find(EntityKind.tag, {"slug": "beginner-friendly"})
    assert [t["name"] for t in found] == ["Beginner Friendly"]


def test_unknown_filter_field_is_rejected(sql_store):
    with pytest.raises(ContentStoreError):
        sql_store.find(EntityKind.topic, {"slug": "x"})


def test_question_links_topic_and_tags(sql_store, db):
    topic = sql_store.create(EntityKind.topic, {"name": "Geography"})
    tag = sql_store.create(EntityKind.tag, {"name": "Europe", "slug": "europe"})

    created = sql_store.create(
        EntityKind.question,
        {
            "code": "Q001",
            "question": [{"type": "paragraph", "children": [{"type": "text", "text": "Capital of France?"}]}],
            "type": "single",
            "answers": [{"id": "a", "content": "Paris"}],
            "correct_answer": ["a"],
            "explanation": None,
            "difficulty": "medium",
            "source": "atlas",
            "version": 2,
            "question_topic": topic["document_id"],
            "question_tags": [tag["document_id"]],
        },
    )

    assert created["question_topic"] == topic["document_id"]
    assert created["question_tags"] == [tag["document_id"]]
    assert created["difficulty"] == "medium"
    row = db.query(Question).one()
    assert row.code == "Q001" and row.topic.name == "Geography"
    assert [t.slug for t in row.tags] == ["europe"]


def test_question_with_unknown_reference_is_rejected(sql_store, db):
    with pytest.raises(ContentStoreError):
        sql_store.create(
            EntityKind.question,
            {
                "question": [],
                "answers": [],
                "correct_answer": [],
                "question_topic": "does-not-exist",
            },
        )
    with pytest.raises(ContentStoreError):
        sql_store.create(EntityKind.question, {"question": [], "answers": [], "correct_answer": [], "type": "poll"})
    assert db.query(Question).count() == 0


def test_full_import_against_database(sql_store, write_json, capsys):
    topics = write_json([{"name": "Geography", "description": "Places"}], "topics.json")
    tags = write_json([{"name": "Europe"}, {"name": "Capitals"}], "tags.json")
    questions = write_json(
        [
            {
                "code": "Q001",
                "question": "What is the capital of France?",
                "answers": [{"id": "a", "content": "Paris"}, {"id": "b", "content": "Lyon"}],
                "correctAnswer": ["a"],
                "topic": "geography",
                "tags": ["europe", "Capitals", "Islands"],
            }
        ],
        "questions.json",
    )

    assert TopicImporter(sql_store).run(topics).created == 1
    assert TagImporter(sql_store).run(tags).created == 2
    first = QuestionImporter(sql_store).run(questions)
    assert first.as_dict() == {"created": 1, "skipped": 0, "failed": 0}
    assert first.missing_tags == ["Islands"]

    [stored] = sql_store.find(EntityKind.question, {"code": "Q001"})
    assert stored["question_topic"] == sql_store.find(EntityKind.topic, {"name": "Geography"})[0]["document_id"]
    assert len(stored["question_tags"]) == 2

    again = (
        TopicImporter(sql_store).run(topics),
        TagImporter(sql_store).run(tags),
        QuestionImporter(sql_store).run(questions),
    )
    assert [r.as_dict() for r in again] == [
        {"created": 0, "skipped": 1, "failed": 0},
        {"created": 0, "skipped": 2, "failed": 0},
        {"created": 0, "skipped": 1, "failed": 0},
    ]
