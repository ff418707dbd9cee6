from common.condition_engine.models import AvailableQuestion, Branch, ConditionalBlock
from common.condition_engine.runner import ConditionRunner, preview_conditional_block


def _block(block_id: str, condition: dict, **extra) -> ConditionalBlock:
    return ConditionalBlock.model_validate({"id": block_id, "title": block_id.title(), "condition": condition, **extra})


ADULT = {
    "operator": "AND",
    "items": [{"type": "statement", "questionId": "age", "questionType": "number", "comparator": "greater_than_or_equal", "value": 18}],
}
MALTA = {
    "operator": "AND",
    "items": [{"type": "statement", "questionId": "country", "comparator": "equals", "value": "MT"}],
}


def test_runner_reports_branch_per_block(questions):
    blocks = [
        _block("adult", ADULT, ifTrue={"existingBlockIds": ["blk_adult"]}),
        _block("malta", MALTA),
        _block("always", {"operator": "AND", "items": []}),
    ]
    report = ConditionRunner(questions).run(blocks, {"age": 16, "country": "MT"})

    assert [r.block_id for r in report.results] == ["adult", "malta", "always"]
    assert report.get("adult").result is False
    assert report.get("adult").branch == Branch.IF_FALSE
    assert report.get("malta").branch == Branch.IF_TRUE
    assert report.get("always").result is True
    assert report.totals == {"TRUE": 2, "FALSE": 1}
    assert report.get("missing") is None
    assert report.run_id


def test_runner_does_not_mutate_blocks(questions):
    block = _block("adult", ADULT, ifTrue={"newQuestions": [{"id": "q_new"}]})
    before = block.model_dump()
    ConditionRunner(questions).run([block], {"age": 30})
    assert block.model_dump() == before


def test_runner_can_select_blocks(questions):
    blocks = [_block("adult", ADULT), _block("malta", MALTA)]
    report = ConditionRunner(questions).run(blocks, {"age": 30}, block_ids={"malta"})
    assert [r.block_id for r in report.results] == ["malta"]
    assert report.totals == {"TRUE": 0, "FALSE": 1}


def test_preview_uses_stored_test_data_and_hides_current_block_questions():
    questions = [
        AvailableQuestion(id="age", block_id="blk_1", title="Operator age", type="number"),
        AvailableQuestion(id="country", block_id="blk_2", title="Country", type="text"),
    ]
    block = _block("adult", {"operator": "AND", "items": ADULT["items"] + MALTA["items"]}, testData={"age": 40, "country": "MT"})

    preview = preview_conditional_block(block, questions, current_block_id="blk_2")

    assert preview.result is True
    assert '"Operator age"' in preview.explanation
    # Country lives in the block being edited, so it is not offered as a title.
    assert '"Unknown Question" equals "MT"' in preview.explanation


def test_preview_prefers_explicit_test_data(questions):
    block = _block("adult", ADULT, testData={"age": 40})
    assert preview_conditional_block(block, questions, test_data={"age": 10}).result is False
