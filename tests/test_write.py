from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Optional

import pytest

from surveykit.write import (
    EMBED,
    TAG,
    FieldNotMatchError,
    OptionAnswer,
    Ref,
    find_field,
    is_field_not_match,
    option_answer_list,
    write_answer,
)


def test_returns_error_if_target_not_mutable():
    with pytest.raises(TypeError):
        write_answer(True, "hello", True)


def test_can_write_to_bool():
    ref = Ref(True)
    write_answer(ref, "", False)
    assert ref.value is False


def test_can_write_string():
    ref = Ref("")
    write_answer(ref, "", "hello")
    assert ref.value == "hello"


def test_can_write_slice():
    target = []
    write_answer(target, "", ["hello", "world"])
    assert target == ["hello", "world"]


def test_can_write_map_string():
    ref = Ref({}, dict[str, str])
    write_answer(ref, "test", OptionAnswer(value="hello", index=5))
    assert ref.value == {"test": "hello"}


def test_can_write_map_int():
    ref = Ref({}, dict[str, int])
    write_answer(ref, "test", OptionAnswer(value="hello", index=5))
    assert ref.value == {"test": 5}


def test_recovers_invalid_conversion():
    with pytest.raises(ValueError):
        write_answer(Ref(False), "", "hello")


def test_handles_non_struct_values():
    ref = Ref("")
    write_answer(ref, "", "world")
    assert ref.value == "world"


def test_can_mutate_struct():
    @dataclass
    class Answers:
        name: str = ""

    answers = Answers()
    write_answer(answers, "name", "world")
    assert answers.name == "world"


def test_option_answer_writes_index_for_ints():
    ref = Ref(0)
    write_answer(ref, "", OptionAnswer(index=10, value="string value"))
    assert ref.value == 10


def test_option_answer_writes_option_answer():
    val = OptionAnswer()
    write_answer(val, "", OptionAnswer(index=10, value="string value"))
    assert val == OptionAnswer(index=10, value="string value")


def test_option_answer_writes_value_for_strings():
    ref = Ref("")
    write_answer(ref, "", OptionAnswer(index=10, value="string value"))
    assert ref.value == "string value"


def test_option_answer_slice_of_ints():
    ref = Ref([], list[int])
    write_answer(ref, "", [OptionAnswer(index=10, value="string value")])
    assert ref.value == [10]


def test_option_answer_slice_of_strings():
    ref = Ref([], list[str])
    write_answer(ref, "", [OptionAnswer(index=10, value="string value")])
    assert ref.value == ["string value"]


def test_can_mutate_map():
    answers = {}
    write_answer(answers, "name", "world")
    assert answers["name"] == "world"


def test_returns_error_if_invalid_map_type():
    with pytest.raises(TypeError):
        write_answer(Ref({}, dict[int, str]), "name", "world")


def test_writes_string_slice_to_int_slice():
    ref = Ref([], list[int])
    write_answer(ref, "name", ["1", "2", "3"])
    assert ref.value == [1, 2, 3]


def test_writes_string_array_to_int_array():
    ref = Ref((0, 0, 0), tuple[int, int, int])
    write_answer(ref, "name", ("1", "2", "3"))
    assert ref.value == (1, 2, 3)


def test_returns_error_when_field_not_found():
    @dataclass
    class Answers:
        name: str = ""

    with pytest.raises(FieldNotMatchError) as info:
        write_answer(Answers(), "", "world")
    assert is_field_not_match(info.value) == ""


def test_is_field_not_match_other_error():
    assert is_field_not_match(ValueError("x")) is None


def test_find_exported_field():
    @dataclass
    class S:
        name: str = "Jack"

    owner, attr = find_field(S(), "name")
    assert getattr(owner, attr) == "Jack"
    assert attr == "name"


def test_find_tagged_field():
    @dataclass
    class S:
        username: str = field(default="Jack", metadata={TAG: "name"})

    owner, attr = find_field(S(), "name")
    assert getattr(owner, attr) == "Jack"
    assert attr == "username"


def test_find_capital_answer_names():
    @dataclass
    class S:
        name: str = "Jack"

    owner, attr = find_field(S(), "Name")
    assert getattr(owner, attr) == "Jack"


def test_tag_overwrites_field_name():
    @dataclass
    class S:
        name: str = "Ralf"
        username: str = field(default="Jack", metadata={TAG: "name"})

    owner, attr = find_field(S(), "name")
    assert getattr(owner, attr) == "Jack"
    assert attr == "username"


@dataclass
class Common:
    name: str = ""


@dataclass
class TaggedCommon:
    username: str = field(default="", metadata={TAG: "name"})


def test_supports_promoted_fields():
    @dataclass
    class S:
        common: Common = field(default_factory=lambda: Common("Jack"), metadata={EMBED: True})
        username: str = ""

    owner, attr = find_field(S(), "Name")
    assert getattr(owner, attr) == "Jack"
    assert attr == "name"


def test_promoted_fields_with_tag():
    @dataclass
    class S:
        common: TaggedCommon = field(
            default_factory=lambda: TaggedCommon("Jack"), metadata={EMBED: True}
        )
        name: str = "Ralf"

    owner, attr = find_field(S(), "name")
    assert getattr(owner, attr) == "Jack"
    assert attr == "username"


def test_promoted_fields_dont_have_priority_over_tags():
    @dataclass
    class S:
        common: Common = field(default_factory=lambda: Common("Ralf"), metadata={EMBED: True})
        username: str = field(default="Jack", metadata={TAG: "name"})

    owner, attr = find_field(S(), "name")
    assert getattr(owner, attr) == "Jack"
    assert attr == "username"


@dataclass
class FieldSettable:
    values: Optional[dict] = None

    def write_answer(self, name, value):
        if self.values is None:
            self.values = {}
        if isinstance(value, str):
            self.values[name] = value
            return
        raise TypeError(f"Incompatible type {type(value).__name__}")


@dataclass
class StringSettable:
    value: str = field(default="", metadata={TAG: "string"})

    def write_answer(self, name, value):
        self.value = value


@dataclass
class TaggedStruct:
    tagged_value: StringSettable = field(
        default_factory=StringSettable, metadata={TAG: "tagged"}
    )


def test_write_with_field_settable():
    first = FieldSettable()
    write_answer(first, "values", "stringVal")
    assert first.values == {"values": "stringVal"}

    second = FieldSettable()
    with pytest.raises(TypeError):
        write_answer(second, "values", 123)
    assert second.values == {}

    string_settable = StringSettable()
    write_answer(string_settable, "", "value1")
    assert string_settable == StringSettable("value1")

    tagged = TaggedStruct()
    write_answer(tagged, "tagged", "stringVal1")
    assert tagged == TaggedStruct(StringSettable("stringVal1"))


def test_can_string_to_bool():
    ref = Ref(True)
    write_answer(ref, "", "false")
    assert ref.value is False


@pytest.mark.parametrize("initial,text,expected", [(1, "2", 2), (1.0, "2.5", 2.5)])
def test_can_string_to_number(initial, text, expected):
    ref = Ref(initial)
    write_answer(ref, "", text)
    assert ref.value == expected


def test_can_convert_struct_field_types():
    @dataclass
    class Person:
        name: str = ""
        age: int = 0
        male: bool = False
        height: float = 0.0
        timeout: timedelta = timedelta()

    person = Person()
    write_answer(person, "name", "Bob")
    write_answer(person, "age", "22")
    write_answer(person, "male", "true")
    write_answer(person, "height", "6.2")
    write_answer(person, "timeout", "30s")
    assert person == Person("Bob", 22, True, 6.2, timedelta(seconds=30))


def test_option_answer_list():
    assert option_answer_list(["a", "b"]) == [OptionAnswer("a", 0), OptionAnswer("b", 1)]


def test_option_answer_to_unsupported_type():
    with pytest.raises(TypeError):
        write_answer(Ref(1.0), "", OptionAnswer("x", 1))


def test_any_map_keeps_option_answer():
    ref = Ref({}, dict[str, Any])
    write_answer(ref, "color", OptionAnswer("red", 0))
    assert ref.value == {"color": OptionAnswer("red", 0)}