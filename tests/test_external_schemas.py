"""Documents that pull their types from xs:include / xs:import schema files."""

from wsdldoc import AcquisitionOptions, Document


WSDL_URL = "http://example.com/svc/wsdl_with_external_schemas.xml"


def assert_user_type(definition):
    assert definition.namespace == "http://example.com/users/types"
    assert definition.order == ("username", "email", "nickname")

    email = definition.fields["email"]
    assert email.required is True
    assert email.array is True

    nickname = definition.fields["nickname"]
    assert nickname.required is False
    assert nickname.array is False
    assert nickname.nillable is True


def test_path_document_loads_included_and_imported_schemas(external_wsdl_path):
    document = Document(external_wsdl_path)

    assert document.base_path == str(external_wsdl_path.resolve())
    assert document.type_definition("tns:AddressType").order == ("street", "city", "zip")
    assert_user_type(document.type_definition("usr:UserType"))


def test_suffix_convention_reaches_imported_type(external_wsdl_path):
    document = Document(external_wsdl_path)

    definition = document.type_definition("User")

    assert definition.name == "User"
    assert_user_type(definition)


def test_operation_types_across_schema_files(external_wsdl_path):
    document = Document(external_wsdl_path)

    assert document.soap_actions == ["create_user"]
    assert document.soap_action("create_user") == "http://example.com/users/CreateUser"
    assert document.endpoint == "http://example.com/users/service"
    assert document.service_name == "UserService"

    request = document.operation_input_type("CreateUser")
    assert request.name == "CreateUserRequest"
    assert request.fields["address"].required is False
    assert document.operation_output_type("create_user").fields["id"].type == "xs:long"


def test_type_definitions_report_includes_external_references(external_wsdl_path):
    document = Document(external_wsdl_path)

    assert document.type_definitions() == [
        (("CreateUserRequest", "user"), "UserType"),
        (("CreateUserRequest", "address"), "AddressType"),
    ]
    assert (("UserType",), "http://example.com/users/types") in document.type_namespaces()


def test_literal_document_has_no_base_path(external_wsdl_path):
    document = Document(external_wsdl_path.read_text(encoding="utf-8"))

    assert document.base_path is None
    assert document.type_definition("CreateUserRequest") is not None
    assert document.type_definition("usr:UserType") is None
    assert document.type_definition("tns:AddressType") is None


def test_literal_document_with_explicit_base_path(external_wsdl_path):
    document = Document(
        external_wsdl_path.read_text(encoding="utf-8"),
        base_path=str(external_wsdl_path),
    )

    assert_user_type(document.type_definition("usr:UserType"))


def test_explicit_none_base_path_disables_loading(external_wsdl_path):
    document = Document(external_wsdl_path, base_path=None)

    assert document.base_path is None
    assert document.type_definition("usr:UserType") is None


def test_load_external_schemas_option(external_wsdl_path):
    document = Document(external_wsdl_path, options=AcquisitionOptions(load_external_schemas=False))

    assert document.base_path is not None
    assert document.type_definition("tns:AddressType") is None
    assert document.type_definition("CreateUserRequest") is not None


def test_url_document_resolves_schemas_against_url(fixture_client):
    document = Document(WSDL_URL, client=fixture_client)

    assert document.base_path == WSDL_URL
    assert_user_type(document.type_definition("usr:UserType"))
    assert document.type_definition("tns:AddressType") is not None
    assert fixture_client.requested == [
        WSDL_URL,
        "http://example.com/svc/xsd/address.xsd",
        "http://example.com/svc/xsd/user.xsd",
    ]


def test_missing_external_schema_does_not_fail_the_document(fixtures_dir, tmp_path):
    wsdl = tmp_path / "service.wsdl"
    wsdl.write_text(
        (fixtures_dir / "wsdl_with_external_schemas.xml").read_text(encoding="utf-8"),
        encoding="utf-8",
    )

    document = Document(wsdl)

    assert document.type_definition("usr:UserType") is None
    assert document.type_definition("CreateUserRequest") is not None
