"""Tests for proto3 rendering."""

from remoteproto.generator import generate, parse, render


def _render(text, options=None):
    return render(generate(parse(text), options).schema)


def describe_render_header():
    def starts_with_syntax_and_package(expect):
        content = _render('viewmodel Counter { namespace = "Acme.Counter" }')
        lines = content.splitlines()
        expect(lines[0]) == 'syntax = "proto3";'
        expect("package acme_counter;" in lines) == True
        expect('option csharp_namespace = "Acme.Counter";' in lines) == True

    def imports_any_and_empty_by_default(expect):
        content = _render("viewmodel Counter { property Count: int }")
        expect('import "google/protobuf/any.proto";' in content) == True
        expect('import "google/protobuf/empty.proto";' in content) == True
        expect('import "google/protobuf/timestamp.proto";' in content) == False
        expect('import "google/protobuf/wrappers.proto";' in content) == False

    def imports_well_known_files_on_demand(expect):
        content = _render(
            """
            viewmodel Counter {
                property Started: DateTimeOffset
                property Limit: long?
            }
        """
        )
        expect('import "google/protobuf/timestamp.proto";' in content) == True
        expect('import "google/protobuf/wrappers.proto";' in content) == True


def describe_render_messages():
    def renders_root_fields(expect):
        content = _render(
            """
            viewmodel Counter {
                property Count: int
                property Label: string
                command Reset()
            }
        """
        )
        expect("// Message representing the full state of the Counter" in content) == True
        expect("message CounterState {" in content) == True
        expect("  int32 count = 1; // int Count" in content) == True
        expect("  string label = 2; // string Label" in content) == True
        expect("message ResetRequest {}" in content) == True
        expect("message ResetResponse {}" in content) == True

    def renders_nullable_and_byte_fields(expect):
        content = _render(
            """
            viewmodel Vm {
                property Count: int?
                property Data: byte[]
            }
        """
        )
        expect("google.protobuf.Int32Value count = 1;" in content) == True
        expect("bytes data = 2;" in content) == True

    def renders_maps_and_entries(expect):
        content = _render(
            """
            viewmodel Vm {
                property Scores: Dictionary<string, int>
                property Lookup: Dictionary<Guid, int>
            }
        """
        )
        expect("map<string, int32> scores = 1;" in content) == True
        expect("repeated Guid_Int32_Entry lookup = 2;" in content) == True
        expect("message Guid_Int32_Entry {" in content) == True
        expect("  string key = 1;" in content) == True
        expect("  int32 value = 2;" in content) == True

    def renders_self_referencing_types_once(expect):
        content = _render(
            """
            viewmodel Vm { property Head: Node }
            type Node { Next: Node }
        """
        )
        expect(content.count("message NodeState {")) == 1
        expect("NodeState next = 1;" in content) == True

    def separates_blocks_with_blank_lines(expect):
        content = _render(
            """
            viewmodel Counter {
                property Count: int
                command Reset()
            }
        """
        )
        expect('import "google/protobuf/empty.proto";\n\n// Message representing' in content) == True
        expect("Counter\nmessage CounterState {" in content) == True
        expect("message ResetRequest {}\n\nmessage ResetResponse {}\n\n" in content) == True
        expect("}\n\nmessage UpdatePropertyValueResponse {" in content) == True
        expect("}\n\nservice CounterService {" in content) == True
        expect("\n\n\n" in content) == False

    def renders_connection_status_enum(expect):
        content = _render("viewmodel Vm { }")
        expect("enum ConnectionStatus {" in content) == True
        expect("  UNKNOWN = 0;" in content) == True
        expect(content.index("enum ConnectionStatus") < content.index("message ConnectionStatusResponse")) == True


def describe_render_service():
    def renders_rpcs(expect):
        content = _render("viewmodel Counter { command Reset() }")
        expect("service CounterService {" in content) == True
        expect("  rpc GetState (google.protobuf.Empty) returns (CounterState);" in content) == True
        expect(
            "  rpc SubscribeToPropertyChanges (SubscribeRequest) returns (stream PropertyChangeNotification);"
            in content
        ) == True
        expect("  rpc Reset (ResetRequest) returns (ResetResponse);" in content) == True
        expect(content.rstrip().endswith("}")) == True

    def is_stable_across_runs(expect):
        text = """
            viewmodel Vm {
                property Owner: Person
                property Groups: List<List<Person>>
            }
            type Person { Friends: Dictionary<Guid, Person> }
        """
        expect(_render(text)) == _render(text)
