import pytest

from masteryls.quiz.models import ErrorKind, IdScope, Option, QuizBlockError, QuizType, RawBlock
from masteryls.quiz.scan import scan
from masteryls.quiz.validate import check_block, parse_block, validate
from tests.conftest import quiz

MC = '{"id":"Q1","title":"T","type":"multiple-choice","body":"B"}'


def lint(text, seen=None):
    return validate(scan(text, source="doc.md"), seen)


def kinds(errors):
    return [e.kind for e in errors]


def test_multiple_choice_block():
    blocks, errors = lint(quiz(MC, "- [ ] A", "- [x] B", "- [ ] C"))
    assert errors == []
    assert len(blocks) == 1
    b = blocks[0]
    assert b.id == "Q1" and b.title == "T" and b.body == "B"
    assert b.type is QuizType.MULTIPLE_CHOICE
    assert b.options == (Option(False, "A"), Option(True, "B"), Option(False, "C"))
    assert b.source == "doc.md" and b.line == 1


def test_options_after_fence_validate_the_same():
    blocks, errors = lint(quiz(MC, "- [ ] A", "- [X] B", inside=False))
    assert errors == []
    assert [o.checked for o in blocks[0].options] == [False, True]


def test_essay_without_options():
    blocks, errors = lint(quiz('{"id":"a","title":"T","type":"essay","body":"B"}'))
    assert errors == []
    assert blocks[0].type is QuizType.ESSAY
    assert blocks[0].options == ()


def test_unknown_type_is_other():
    blocks, errors = lint(quiz('{"id":"a","title":"T","type":"multiple-select","body":"B"}', "- [ ] A"))
    assert errors == []
    assert blocks[0].type is QuizType.OTHER
    assert blocks[0].type_name == "multiple-select"
    assert blocks[0].public_dict()["type"] == "multiple-select"


def test_extra_header_keys_are_kept():
    header = '{"id":"a","title":"T","type":"essay","body":"B","points":5}'
    blocks, _ = lint(quiz(header))
    assert dict(blocks[0].extra) == {"points": 5}
    assert blocks[0].to_dict()["extra"] == {"points": 5}


@pytest.mark.parametrize("header", ["{not json", "", '["id", "title"]', '{"id":"a"} trailing'])
def test_malformed_header(header):
    blocks, errors = lint(quiz(header))
    assert blocks == []
    assert kinds(errors) == [ErrorKind.MALFORMED_HEADER]


def test_non_string_field_is_malformed():
    _, errors = lint(quiz('{"id":7,"title":"T","type":"essay","body":"B"}'))
    assert kinds(errors) == [ErrorKind.MALFORMED_HEADER]
    assert errors[0].field == "id"


@pytest.mark.parametrize("missing", ["id", "title", "type", "body"])
def test_missing_field(missing):
    fields = {"id": '"a"', "title": '"T"', "type": '"essay"', "body": '"B"'}
    del fields[missing]
    header = "{" + ",".join(f'"{k}":{v}' for k, v in fields.items()) + "}"
    _, errors = lint(quiz(header))
    assert kinds(errors) == [ErrorKind.MISSING_FIELD]
    assert errors[0].field == missing
    assert missing in errors[0].message


@pytest.mark.parametrize("line", ["- [y] A", "- [x]A", "* [x] A", "- [x]"])
def test_malformed_option(line):
    text = quiz(MC, "- [ ] fine", line)
    blocks, errors = lint(text)
    assert blocks == []
    assert kinds(errors) == [ErrorKind.MALFORMED_OPTION]
    assert errors[0].text == line
    assert errors[0].line == 4


def test_prose_inside_option_list_is_malformed():
    _, errors = lint(quiz(MC, "- [x] A", "then some prose"))
    assert kinds(errors) == [ErrorKind.MALFORMED_OPTION]


def test_no_correct_answer():
    _, errors = lint(quiz(MC, "- [ ] A", "- [ ] B"))
    assert kinds(errors) == [ErrorKind.NO_CORRECT_ANSWER]
    assert errors[0].block_id == "Q1"


def test_multiple_choice_without_options_has_no_correct_answer():
    _, errors = lint(quiz(MC))
    assert kinds(errors) == [ErrorKind.NO_CORRECT_ANSWER]


def test_empty_fields_are_all_reported():
    _, errors = lint(quiz('{"id":"a","title":"  ","type":"essay","body":""}'))
    assert kinds(errors) == [ErrorKind.EMPTY_FIELD, ErrorKind.EMPTY_FIELD]
    assert [e.field for e in errors] == ["title", "body"]
    assert all(e.block_id == "a" for e in errors)


def test_blank_id():
    _, errors = lint(quiz('{"id":" ","title":"T","type":"essay","body":"B"}'))
    assert kinds(errors) == [ErrorKind.EMPTY_FIELD]
    assert errors[0].field == "id"
    assert errors[0].block_id is None


def test_duplicate_id_reported_once_and_first_stays_valid():
    text = quiz(MC, "- [x] A") + "\nProse.\n\n" + quiz(MC, "- [x] B")
    blocks, errors = lint(text)
    assert [b.options[0].text for b in blocks] == ["A"]
    assert kinds(errors) == [ErrorKind.DUPLICATE_ID]
    assert errors[0].block_id == "Q1"
    assert errors[0].index == 1
    assert "doc.md:1" in errors[0].message


def test_failed_block_still_claims_its_id():
    text = quiz(MC, "- [ ] A") + quiz(MC, "- [x] A")
    _, errors = lint(text)
    assert kinds(errors) == [ErrorKind.NO_CORRECT_ANSWER, ErrorKind.DUPLICATE_ID]


def test_shared_scope_across_documents():
    seen = IdScope()
    first, e1 = validate(scan(quiz(MC, "- [x] A"), "a.md"), seen)
    second, e2 = validate(scan(quiz(MC, "- [x] A"), "b.md"), seen)
    assert len(first) == 1 and e1 == []
    assert second == [] and kinds(e2) == [ErrorKind.DUPLICATE_ID]
    assert "Q1" in seen and len(seen) == 1


def test_separate_scopes_do_not_collide():
    _, e1 = validate(scan(quiz(MC, "- [x] A"), "a.md"))
    _, e2 = validate(scan(quiz(MC, "- [x] A"), "b.md"))
    assert e1 == [] and e2 == []


def test_truncated_block_does_not_stop_validation():
    text = quiz(MC, "- [x] A") + "```masteryls\n{\"id\":\"late\"}\n"
    blocks, errors = lint(text)
    assert len(blocks) == 1
    assert kinds(errors) == [ErrorKind.TRUNCATED_BLOCK]
    assert errors[0].line == 5


def test_errors_accumulate_across_blocks():
    text = (
        quiz("{bad")
        + quiz(MC, "- [ ] A")
        + quiz('{"id":"ok","title":"T","type":"essay","body":"B"}')
        + quiz('{"id":"x","title":"T","type":"multiple-choice","body":"B"}', "- [?] A")
    )
    blocks, errors = lint(text)
    assert [b.id for b in blocks] == ["ok"]
    assert kinds(errors) == [ErrorKind.MALFORMED_HEADER, ErrorKind.NO_CORRECT_ANSWER, ErrorKind.MALFORMED_OPTION]
    assert [e.index for e in errors] == [0, 1, 3]


def test_quiz_looking_code_is_never_extracted():
    text = "```javascript\nconst x === 1;\n" + MC + "\n- [x] A\n```\n"
    assert lint(text) == ([], [])


def test_parse_block_raises_with_error_attached():
    raw = RawBlock(index=2, line=10, end_line=12, header_text="nope", source="f.md")
    with pytest.raises(QuizBlockError) as exc:
        parse_block(raw)
    err = exc.value.error
    assert err.kind is ErrorKind.MALFORMED_HEADER
    assert (err.source, err.line, err.index) == ("f.md", 10, 2)
    assert err.location() == "f.md:10"


def test_check_block_on_parsed_block():
    raw = RawBlock(index=0, line=1, end_line=3, header_text=MC, option_lines=((2, "- [x] A"),))
    block = parse_block(raw)
    seen = IdScope()
    assert check_block(block, seen) == []
    assert kinds(check_block(block, seen)) == [ErrorKind.DUPLICATE_ID]


def test_answer_and_public_views():
    blocks, _ = lint(quiz(MC, "- [ ] A", "- [x] B", "- [x] C"))
    b = blocks[0]
    assert b.public_dict()["options"] == ["A", "B", "C"]
    assert b.answer_dict() == {"correct": [1, 2], "answers": ["B", "C"]}


def test_block_with_bad_option_still_claims_its_id():
    text = quiz(MC, "- [y] A") + quiz(MC, "- [x] A")
    blocks, errors = lint(text)
    assert blocks == []
    assert kinds(errors) == [ErrorKind.MALFORMED_OPTION, ErrorKind.DUPLICATE_ID]
    assert errors[0].block_id == "Q1"
    assert errors[1].index == 1


def test_bad_option_on_second_copy_reports_duplicate_too():
    text = quiz(MC, "- [x] A") + quiz(MC, "- [y] A")
    blocks, errors = lint(text)
    assert [b.index for b in blocks] == [0]
    assert kinds(errors) == [ErrorKind.MALFORMED_OPTION, ErrorKind.DUPLICATE_ID]


def test_line_separator_inside_body_is_kept():
    header = '{"id":"a","title":"T","type":"essay","body":"line\u2028sep"}'
    blocks, errors = lint(quiz(header) + "\f\n" + quiz(MC, "- [x] A"))
    assert errors == []
    assert blocks[0].body == "line\u2028sep"
    assert blocks[1].line == 5


@pytest.mark.parametrize("tag", ["Multiple-Choice", " multiple-choice", "ESSAY"])
def test_type_tag_must_match_exactly(tag):
    blocks, errors = lint(quiz('{"id":"a","title":"T","type":"%s","body":"B"}' % tag))
    assert errors == []
    assert blocks[0].type is QuizType.OTHER
    assert blocks[0].type_name == tag


def test_ids_are_compared_verbatim():
    text = quiz('{"id":" Q1","title":"T","type":"essay","body":"B"}') + quiz('{"id":"Q1","title":"T","type":"essay","body":"B"}')
    blocks, errors = lint(text)
    assert errors == []
    assert [b.id for b in blocks] == [" Q1", "Q1"]
