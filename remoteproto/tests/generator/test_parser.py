"""Tests for view model description parser."""

import pytest

from remoteproto.generator import parse
from remoteproto.generator.parser import ValidationError


def describe_parse_viewmodel():
    def parses_properties_in_declared_order(expect):
        vm = parse(
            """
            viewmodel Counter {
                property Count: int
                property Label: string
            }
        """
        )
        expect(vm.name) == "Counter"
        expect([p.name for p in vm.properties]) == ["Count", "Label"]
        expect([p.ordinal for p in vm.properties]) == [1, 2]
        expect(vm.properties[0].type.name) == "int"

    def parses_commands(expect):
        vm = parse(
            """
            viewmodel Counter {
                command Reset()
                async command AddAsync(amount: int, note: string?)
            }
        """
        )
        expect(len(vm.commands)) == 2
        expect(vm.commands[0].name) == "Reset"
        expect(vm.commands[0].is_async) == False
        expect(vm.commands[0].parameters) == ()

        add = vm.commands[1]
        expect(add.name) == "AddAsync"
        expect(add.is_async) == True
        expect([p.name for p in add.parameters]) == ["amount", "note"]
        expect([p.ordinal for p in add.parameters]) == [1, 2]
        expect(add.parameters[1].type.nullable) == True

    def parses_options(expect):
        vm = parse(
            """
            viewmodel Counter {
                namespace = "Acme.Counter"
                service = "CounterRpc"
            }
        """
        )
        expect(vm.option("namespace")) == "Acme.Counter"
        expect(vm.option("service")) == "CounterRpc"
        expect(vm.option("missing", "fallback")) == "fallback"

    def ignores_comments(expect):
        vm = parse(
            """
            # Leading comment
            viewmodel Counter {
                property Count: int  # trailing
            }
        """
        )
        expect(len(vm.properties)) == 1


def describe_parse_types():
    def parses_generic_types(expect):
        vm = parse(
            """
            viewmodel Sample {
                property Scores: Dictionary<string, List<int>>
            }
        """
        )
        t = vm.properties[0].type
        expect(t.name) == "Dictionary"
        expect(len(t.arguments)) == 2
        expect(t.arguments[1].name) == "List"
        expect(t.arguments[1].arguments[0].name) == "int"
        expect(str(t)) == "Dictionary<string, List<int>>"

    def parses_nullable_forms_the_same_way(expect):
        vm = parse(
            """
            viewmodel Sample {
                property A: int?
                property B: Nullable<int>
                property C: System.Nullable<int>
            }
        """
        )
        types = [p.type for p in vm.properties]
        expect(all(t.name == "int" for t in types)) == True
        expect(all(t.nullable for t in types)) == True

    def parses_arrays_with_rank(expect):
        vm = parse(
            """
            viewmodel Sample {
                property Flat: int[]
                property Grid: int[,]
                property Jagged: int[][]
            }
        """
        )
        flat, grid, jagged = (p.type for p in vm.properties)
        expect(flat.rank) == 1
        expect(flat.element.name) == "int"
        expect(grid.rank) == 2
        expect(str(grid)) == "int[,]"
        expect(jagged.rank) == 1
        expect(jagged.element.rank) == 1

    def parses_qualified_names(expect):
        vm = parse(
            """
            viewmodel Sample {
                property Id: System.Guid
            }
        """
        )
        expect(vm.properties[0].type.name) == "System.Guid"
        expect(vm.properties[0].type.base_name) == "Guid"


def describe_parse_declarations():
    def parses_composite_types(expect):
        vm = parse(
            """
            viewmodel Sample {
                property Owner: Person
            }

            type Acme.Person {
                Name: string
                Age: int
            }
        """
        )
        expect(len(vm.composites)) == 1
        expect(vm.composites[0].name) == "Acme.Person"
        expect([m.name for m in vm.composites[0].members]) == ["Name", "Age"]

    def looks_up_members_by_short_name(expect):
        vm = parse(
            """
            viewmodel Sample {
                property Owner: Person
            }

            type Acme.Person {
                Name: string
            }
        """
        )
        members = vm.member_lookup(vm.properties[0].type)
        expect([m.name for m in members]) == ["Name"]

    def marks_enum_references(expect):
        vm = parse(
            """
            viewmodel Sample {
                property Mode: Mode
                property Modes: List<Mode>
                property Count: int
            }

            enum Mode { Off, On = 4, }
        """
        )
        expect([v.name for v in vm.enums[0].values]) == ["Off", "On"]
        expect(vm.properties[0].type.is_enum) == True
        expect(vm.properties[1].type.is_enum) == False
        expect(vm.properties[1].type.arguments[0].is_enum) == True
        expect(vm.properties[2].type.is_enum) == False

    def keeps_declared_enum_numbers(expect):
        vm = parse(
            """
            viewmodel Sample { }

            enum Level { Low, Mid = 5, High = -1 }
        """
        )
        values = [(v.name, v.number) for v in vm.enums[0].values]
        expect(values) == [("Low", None), ("Mid", 5), ("High", -1)]

    def resolves_short_and_qualified_references_to_one_declaration(expect):
        vm = parse(
            """
            viewmodel Sample {
                property A: Node
                property B: Acme.Node
                property C: List<Node>
            }

            type Acme.Node { Next: Node }
        """
        )
        a, b, c = (p.type for p in vm.properties)
        expect(vm.composite(a).name) == "Acme.Node"
        expect(vm.composite(b).name) == "Acme.Node"
        expect(vm.composite(c)) == None


def describe_validation():
    def rejects_missing_viewmodel(expect):
        with pytest.raises(ValidationError) as exc:
            parse("type Person { Name: string }")
        expect("No viewmodel" in str(exc.value)) == True

    def rejects_multiple_viewmodels(expect):
        with pytest.raises(ValidationError) as exc:
            parse("viewmodel A { } viewmodel B { }")
        expect("Only one viewmodel" in str(exc.value)) == True

    def rejects_unknown_option(expect):
        with pytest.raises(ValidationError) as exc:
            parse('viewmodel A { colour = "red" }')
        expect("Unknown option colour" in str(exc.value)) == True

    def rejects_duplicate_properties(expect):
        with pytest.raises(ValidationError) as exc:
            parse(
                """
                viewmodel A {
                    property Count: int
                    property Count: long
                }
            """
            )
        expect("Property Count" in str(exc.value)) == True

    def rejects_commands_differing_only_by_async_suffix(expect):
        with pytest.raises(ValidationError) as exc:
            parse(
                """
                viewmodel A {
                    command Save()
                    async command SaveAsync()
                }
            """
            )
        expect("Command Save" in str(exc.value)) == True

    def rejects_duplicate_type_declarations(expect):
        with pytest.raises(ValidationError) as exc:
            parse(
                """
                viewmodel A { }
                type Item { Name: string }
                enum Item { One }
            """
            )
        expect("Type Item" in str(exc.value)) == True

    def rejects_duplicate_members(expect):
        with pytest.raises(ValidationError) as exc:
            parse(
                """
                viewmodel A { }
                type Item {
                    Name: string
                    Name: int
                }
            """
            )
        expect("Member Name" in str(exc.value)) == True

    def rejects_duplicate_enum_values(expect):
        with pytest.raises(ValidationError) as exc:
            parse(
                """
                viewmodel A { }
                enum Mode { On, Off, On = 3 }
            """
            )
        expect("Value On of enum Mode" in str(exc.value)) == True


def describe_parse_errors():
    def rejects_invalid_syntax(expect):
        with pytest.raises(Exception):
            parse("this is not valid syntax")

    def rejects_unclosed_brace(expect):
        with pytest.raises(Exception):
            parse(
                """
                viewmodel Broken {
                    property Count: int
            """
            )
