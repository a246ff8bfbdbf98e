"""Unit tests for the Record container."""

from __future__ import annotations

import copy
import pickle

import pytest

from structwire import (
    ByteSink,
    ByteSource,
    DefaultField,
    OptionalField,
    Record,
    RequiredField,
    SchemaError,
    Struct,
    StructDescriptor,
    ValidationError,
    decode,
    encode,
)


class Bonk(Record):
    """Record subclass with a class-level descriptor."""

    struct_descriptor = Struct(
        "Bonk",
        OptionalField(1, "message", "string"),
        DefaultField(2, "count", "i32"),
    )


class TestConstruction:
    """Test creating records."""

    def test_starts_unset(self, everything_descriptor: StructDescriptor) -> None:
        """Test every field starts unset with its zero value."""
        record = Record(everything_descriptor)
        for field in everything_descriptor.fields:
            assert not record.is_set(field)
        assert record.get("flag") is False
        assert record.get("count") == 0
        assert record.get("ratio") == 0.0
        assert record.get("label") == ""

    def test_keyword_values(self, bonk_descriptor: StructDescriptor) -> None:
        """Test keyword arguments set fields, None leaves them unset."""
        record = Record(bonk_descriptor, message=None, count=7)
        assert record.is_set("count")
        assert not record.is_set("message")

    def test_unknown_keyword(self, bonk_descriptor: StructDescriptor) -> None:
        """Test unknown keyword arguments are rejected."""
        with pytest.raises(TypeError, match="no field 'nope'"):
            Record(bonk_descriptor, nope=1)

    def test_subclass(self) -> None:
        """Test a subclass uses its struct_descriptor."""
        bonk = Bonk(count=7)
        assert bonk.descriptor is Bonk.struct_descriptor
        assert bonk.count == 7

    def test_no_descriptor(self) -> None:
        """Test a bare Record needs a descriptor."""
        with pytest.raises(SchemaError, match="no struct descriptor"):
            Record()

    def test_wrong_descriptor_type(self) -> None:
        """Test the descriptor argument is type-checked."""
        with pytest.raises(TypeError):
            Record({"name": "Bonk"})  # type: ignore[arg-type]

    def test_bad_class_descriptor(self) -> None:
        """Test struct_descriptor must be a StructDescriptor."""
        with pytest.raises(SchemaError, match="must be a StructDescriptor"):

            class Broken(Record):
                struct_descriptor = "Bonk"  # type: ignore[assignment]


class TestFieldAccess:
    """Test get/set/unset/is_set/clear."""

    def test_set_and_get(self, bonk_descriptor: StructDescriptor) -> None:
        """Test storing values by name, id and descriptor."""
        record = Record(bonk_descriptor)
        record.set("message", "hi")
        record.set(2, 7)

        assert record.get(1) == "hi"
        assert record.get(bonk_descriptor.fields[1]) == 7
        assert record.is_set("message")
        assert record.is_set(2)

    def test_zero_value_is_still_set(self, bonk_descriptor: StructDescriptor) -> None:
        """Test presence is independent of the value."""
        record = Record(bonk_descriptor)
        record.set("count", 0)
        assert record.is_set("count")
        assert record.get("count") == 0

    def test_unset(self, bonk_descriptor: StructDescriptor) -> None:
        """Test unset clears the flag and resets the value."""
        record = Record(bonk_descriptor, message="hi", count=7)
        record.unset("count")
        assert not record.is_set("count")
        assert record.get("count") == 0
        assert record.is_set("message")

    def test_clear(self, bonk_descriptor: StructDescriptor) -> None:
        """Test clear unsets everything."""
        record = Record(bonk_descriptor, message="hi", count=7)
        record.clear()
        assert record.to_dict() == {}
        assert record.get("message") == ""

    def test_type_mismatch(self, bonk_descriptor: StructDescriptor) -> None:
        """Test values of the wrong type raise TypeError."""
        record = Record(bonk_descriptor)
        with pytest.raises(TypeError, match="Field count"):
            record.set("count", "7")
        with pytest.raises(TypeError):
            record.set("count", True)
        with pytest.raises(TypeError):
            record.set("message", None)
        with pytest.raises(TypeError):
            record.set("message", 5)
        assert record.to_dict() == {}

    def test_out_of_range(self, bonk_descriptor: StructDescriptor) -> None:
        """Test integers outside the field width raise ValueError."""
        record = Record(bonk_descriptor)
        with pytest.raises(ValueError, match="out of range"):
            record.set("count", 2**31)
        assert not record.is_set("count")

    def test_double_out_of_range(self, everything_descriptor: StructDescriptor) -> None:
        """Test ints too large for a double raise ValueError."""
        record = Record(everything_descriptor)
        with pytest.raises(ValueError, match="Field ratio \\(DOUBLE\\): .*out of range"):
            record.set("ratio", 10**400)
        assert not record.is_set("ratio")

    def test_unknown_field(self, bonk_descriptor: StructDescriptor) -> None:
        """Test unknown field references raise KeyError."""
        record = Record(bonk_descriptor)
        with pytest.raises(KeyError):
            record.get("nope")
        with pytest.raises(KeyError):
            record.set(3, 1)
        with pytest.raises(KeyError):
            record.is_set("nope")

    def test_attribute_access(self, bonk_descriptor: StructDescriptor) -> None:
        """Test reading and writing fields as attributes."""
        record = Record(bonk_descriptor)
        record.count = 7
        assert record.count == 7
        assert record.is_set("count")

        record.count = None
        assert not record.is_set("count")

        record.message = "hi"
        del record.message
        assert not record.is_set("message")

    def test_attribute_unknown(self, bonk_descriptor: StructDescriptor) -> None:
        """Test unknown attributes raise AttributeError."""
        record = Record(bonk_descriptor)
        with pytest.raises(AttributeError):
            record.nope
        with pytest.raises(AttributeError):
            record.nope = 1
        assert "count" in dir(record)

    def test_field_named_like_method(self) -> None:
        """Test fields shadowed by Record attributes stay reachable through get/set."""
        record = Record(Struct("Odd", OptionalField(1, "clear", "i32")), clear=5)
        assert record.get("clear") == 5
        assert callable(record.clear)

        with pytest.raises(AttributeError, match="use get\\('clear'\\)"):
            record.clear = 6
        with pytest.raises(AttributeError):
            del record.clear
        assert record.get("clear") == 5

    def test_field_for_id(self, bonk_descriptor: StructDescriptor) -> None:
        """Test id lookup through the record."""
        record = Record(bonk_descriptor)
        assert record.field_for_id(1) == bonk_descriptor.fields[0]
        assert record.field_for_id(42) is None

    def test_set_fields_order(self, everything_descriptor: StructDescriptor) -> None:
        """Test set_fields yields declaration order."""
        record = Record(everything_descriptor, label="x", flag=True, count=3)
        assert [f.name for f, _ in record.set_fields()] == ["flag", "count", "label"]
        assert record.to_dict() == {"flag": True, "count": 3, "label": "x"}


class TestValidation:
    """Test required-field validation."""

    def test_valid(self, everything_descriptor: StructDescriptor) -> None:
        """Test a record with its required field set validates."""
        Record(everything_descriptor, flag=False).validate()

    def test_missing_required(self, everything_descriptor: StructDescriptor) -> None:
        """Test a missing required field is reported."""
        record = Record(everything_descriptor, count=1)
        with pytest.raises(ValidationError, match="'flag'") as exc_info:
            record.validate()
        assert exc_info.value.field is not None
        assert exc_info.value.field.id == 1
        assert exc_info.value.struct_name == "Everything"

    def test_first_missing_reported(self) -> None:
        """Test the first unset required field in declaration order is named."""
        descriptor = Struct(
            "Pair",
            RequiredField(5, "second", "i32"),
            RequiredField(1, "first", "i32"),
        )
        with pytest.raises(ValidationError) as exc_info:
            Record(descriptor).validate()
        assert exc_info.value.field is not None
        assert exc_info.value.field.name == "second"

    def test_optional_fields_may_be_absent(self, bonk_descriptor: StructDescriptor) -> None:
        """Test OPTIONAL and DEFAULT fields never fail validation."""
        Record(bonk_descriptor).validate()


class TestCopy:
    """Test deep copies."""

    def test_deep_copy_independent(self) -> None:
        """Test copies do not share state."""
        original = Bonk(message="hi", count=7)
        duplicate = original.deep_copy()

        assert duplicate == original
        assert type(duplicate) is Bonk

        duplicate.count = 8
        duplicate.unset("message")
        assert original.count == 7
        assert original.message == "hi"

    def test_copy_module(self) -> None:
        """Test copy.copy and copy.deepcopy."""
        original = Bonk(count=7)
        assert copy.copy(original) == original
        assert copy.deepcopy(original) == original
        assert copy.copy(original) is not original

    def test_pickle(self, bonk_descriptor: StructDescriptor) -> None:
        """Test records pickle with their descriptor."""
        for record in (Bonk(message="hi"), Record(bonk_descriptor, count=-3)):
            restored = pickle.loads(pickle.dumps(record))
            assert restored == record
            assert type(restored) is type(record)


class TestEquality:
    """Test structural equality and hashing."""

    def test_equal(self, bonk_descriptor: StructDescriptor) -> None:
        """Test same flags and values are equal."""
        assert Record(bonk_descriptor, count=7) == Bonk(count=7)

    def test_presence_matters(self, bonk_descriptor: StructDescriptor) -> None:
        """Test an explicit zero differs from unset."""
        assert Record(bonk_descriptor, count=0) != Record(bonk_descriptor)

    def test_values_matter(self) -> None:
        """Test different values are unequal."""
        assert Bonk(message="a") != Bonk(message="b")

    def test_different_shapes(self, bonk_descriptor: StructDescriptor) -> None:
        """Test records of different shapes are never equal."""
        other = Struct("Bonk", DefaultField(2, "count", "i32"))
        assert Record(other, count=7) != Record(bonk_descriptor, count=7)

    def test_non_record(self) -> None:
        """Test comparison with other types."""
        assert Bonk() != 5
        assert Bonk() != "Bonk()"

    def test_hash(self) -> None:
        """Test equal records hash alike and work in sets."""
        assert hash(Bonk(count=7)) == hash(Bonk(count=7))
        assert len({Bonk(count=7), Bonk(count=7), Bonk(count=8)}) == 2

    def test_nan_equal_to_itself(self, everything_descriptor: StructDescriptor) -> None:
        """Test NaN doubles compare equal and hash alike, as compare_to orders them."""
        a = Record(everything_descriptor, flag=True, ratio=float("nan"))
        b = Record(everything_descriptor, flag=True, ratio=float("nan"))
        assert a == b
        assert a.compare_to(b) == 0
        assert hash(a) == hash(b)
        assert a != Record(everything_descriptor, flag=True, ratio=1.0)

    def test_nan_round_trip(self, everything_descriptor: StructDescriptor) -> None:
        """Test a NaN field survives both schemes."""
        record = Record(everything_descriptor, flag=False, ratio=float("nan"))
        for scheme in ("standard", "tuple"):
            data = encode(record, scheme=scheme)
            assert decode(everything_descriptor, data, scheme=scheme) == record


class TestOrdering:
    """Test compare_to and rich comparisons."""

    def test_unset_before_set(self) -> None:
        """Test an unset field sorts before any set value."""
        assert Bonk().compare_to(Bonk(message="")) < 0
        assert Bonk(message="").compare_to(Bonk()) > 0

    def test_values(self) -> None:
        """Test set fields compare by value."""
        assert Bonk(count=1) < Bonk(count=2)
        assert Bonk(message="a", count=9) < Bonk(message="b", count=1)

    def test_declaration_order_decides(self) -> None:
        """Test earlier fields dominate later ones."""
        assert Bonk(count=100) < Bonk(message="a")

    def test_equal_compare_zero(self) -> None:
        """Test equal records compare as zero."""
        assert Bonk(message="x", count=1).compare_to(Bonk(message="x", count=1)) == 0
        assert Bonk(count=1) <= Bonk(count=1)
        assert Bonk(count=1) >= Bonk(count=1)

    def test_sorting(self) -> None:
        """Test records sort with sorted()."""
        records = [Bonk(count=3), Bonk(), Bonk(message="a"), Bonk(count=1)]
        assert sorted(records) == [Bonk(), Bonk(count=1), Bonk(count=3), Bonk(message="a")]

    def test_different_struct_names(self, bonk_descriptor: StructDescriptor) -> None:
        """Test different shapes order by struct name."""
        apple = Record(Struct("Apple", DefaultField(1, "x", "i32")))
        assert apple.compare_to(Bonk()) < 0
        assert Bonk().compare_to(apple) > 0

    def test_same_name_different_shape(self) -> None:
        """Test shapes sharing a name cannot be ordered."""
        impostor = Record(Struct("Bonk", DefaultField(1, "x", "i64")))
        with pytest.raises(TypeError, match="different shapes"):
            Bonk().compare_to(impostor)

    def test_non_record(self) -> None:
        """Test ordering against other types."""
        with pytest.raises(TypeError):
            Bonk().compare_to(5)  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            Bonk() < 5  # noqa: B015


class TestRepr:
    """Test the string form."""

    def test_repr(self) -> None:
        """Test only set fields are listed."""
        assert repr(Bonk()) == "Bonk()"
        assert repr(Bonk(count=7)) == "Bonk(count=7)"
        assert repr(Bonk(message="hi", count=7)) == "Bonk(message='hi', count=7)"


class TestReadWrite:
    """Test Record.read and Record.write."""

    def test_write_then_read(self) -> None:
        """Test both schemes through the record methods."""
        for scheme in ("standard", "tuple"):
            sink = ByteSink()
            Bonk(message="hi", count=7).write(sink, scheme)

            target = Bonk(count=99)
            target.read(ByteSource(sink.getvalue()), scheme)
            assert target == Bonk(message="hi", count=7)
