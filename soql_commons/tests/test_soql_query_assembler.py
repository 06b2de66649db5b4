import pytest

from soql_commons.constants.app_constants import AppConstants
from soql_commons.model.condition_model import Condition, Connector, Operator
from soql_commons.model.field_metadata_model import FieldMetadata, FieldType
from soql_commons.model.query_model import QuerySpec
from soql_commons.repositories.field_metadata_index import FieldMetadataIndex
from soql_commons.utils.soql_query_assembler import SoqlQueryAssembler, assemble


@pytest.fixture
def metadata_index():
    index = FieldMetadataIndex()
    index.replace('Account', {
        'Name': FieldMetadata(identifier='Name', is_indexed=True),
        'Industry': FieldMetadata(identifier='Industry', field_type=FieldType.TEXT),
        'NumberOfEmployees': FieldMetadata(identifier='NumberOfEmployees', field_type=FieldType.NUMBER),
    })
    return index


@pytest.fixture
def assembler():
    return SoqlQueryAssembler()


def condition(seq, field, operator, value, connector=Connector.AND):
    return Condition(sequence_id=seq, field=field, operator=operator, value=value,
                     connector=connector, is_first=seq == 1)

# ----------------------------
# Positive Test Cases
# ----------------------------

def test_end_to_end_example(assembler, metadata_index):
    spec = QuerySpec(
        entity='Account',
        selected_fields=['Name', 'Industry'],
        conditions=[condition(1, 'Industry', '=', 'Technology')],
        order_by_field='Name',
        sort_direction='ASC',
        limit=25,
    )
    expected = "SELECT Name, Industry FROM Account WHERE Industry = 'Technology' ORDER BY Name ASC LIMIT 25"
    assert assembler.assemble(spec, metadata_index) == expected


def test_no_fields_selects_id(assembler):
    spec = QuerySpec(entity='Contact', limit=None, offset=None)
    assert assembler.assemble(spec) == "SELECT Id FROM Contact"


def test_default_limit_is_emitted(assembler):
    assert assembler.assemble(QuerySpec(entity='Lead')) == "SELECT Id FROM Lead LIMIT 10"


@pytest.mark.parametrize("spec", [
    QuerySpec(),
    QuerySpec(entity='', selected_fields=['Name'], limit=500, offset=20, order_by_field='Name'),
    QuerySpec(conditions=[condition(1, 'Name', '=', 'x')]),
])
def test_no_entity_returns_default_query(assembler, spec):
    assert assembler.assemble(spec) == AppConstants.DEFAULT_QUERY
    assert assemble(spec) == 'SELECT Id FROM Account LIMIT 10'


def test_or_connector_between_conditions(assembler, metadata_index):
    spec = QuerySpec(
        entity='Account',
        conditions=[
            condition(1, 'Name', '=', 'Acme', connector=Connector.OR),
            condition(2, 'NumberOfEmployees', '>', '100', connector=Connector.OR),
        ],
        limit=None,
    )
    query = assembler.assemble(spec, metadata_index)
    assert query == "SELECT Id FROM Account WHERE Name = 'Acme' OR NumberOfEmployees > 100"
    assert query.count(' OR ') == 1
    assert 'WHERE OR' not in query


def test_incomplete_conditions_are_skipped(assembler, metadata_index):
    spec = QuerySpec(
        entity='Account',
        conditions=[
            condition(1, '', '=', 'orphan'),
            condition(2, 'Name', '=', ''),
            condition(3, 'Industry', '=', 'Banking', connector=Connector.OR),
            condition(4, 'Name', 'LIKE', ''),
            condition(5, 'NumberOfEmployees', '<', '50', connector=Connector.AND),
            condition(6, '', '=', ''),
        ],
        limit=None,
    )
    expected = "SELECT Id FROM Account WHERE Industry = 'Banking' AND NumberOfEmployees < 50"
    assert assembler.assemble(spec, metadata_index) == expected


def test_all_incomplete_conditions_drop_where(assembler):
    spec = QuerySpec(entity='Account', conditions=[condition(1, 'Name', '=', '')], limit=None)
    assert assembler.assemble(spec) == "SELECT Id FROM Account"


def test_order_limit_offset(assembler):
    spec = QuerySpec(entity='Case', selected_fields=['Subject'], order_by_field='CreatedDate',
                     sort_direction='desc', limit=100, offset=200)
    assert assembler.assemble(spec) == "SELECT Subject FROM Case ORDER BY CreatedDate DESC LIMIT 100 OFFSET 200"


def test_zero_limit_and_offset_are_omitted(assembler):
    spec = QuerySpec(entity='User', limit=0, offset=0)
    assert assembler.assemble(spec) == "SELECT Id FROM User"


def test_limit_clamped(assembler):
    spec = QuerySpec(entity='Account', limit=60000)
    assert spec.limit == AppConstants.MAX_LIMIT
    assert assembler.assemble(spec).endswith("LIMIT 50000")


def test_selected_fields_deduplicated_in_order():
    spec = QuerySpec(entity='Account', selected_fields=['Name', 'Id', 'Name'])
    assert spec.selected_fields == ['Name', 'Id']


def test_untyped_formatting_without_metadata(assembler):
    spec = QuerySpec(
        entity='Opportunity',
        conditions=[
            condition(1, 'Amount', '>=', '5000'),
            condition(2, 'StageName', 'IN', 'Prospecting, Closed Won'),
            condition(3, 'Name', 'LIKE', 'Big'),
        ],
        limit=None,
    )
    expected = ("SELECT Id FROM Opportunity WHERE Amount >= 5000"
                " AND StageName IN ('Prospecting','Closed Won') AND Name LIKE '%Big%'")
    assert assembler.assemble(spec) == expected


def test_assemble_is_deterministic(assembler, metadata_index):
    spec = QuerySpec(entity='Account', selected_fields=['Name'],
                     conditions=[condition(1, 'Name', Operator.NOT_IN, 'a,b')])
    assert assembler.assemble(spec, metadata_index) == assembler.assemble(spec, metadata_index)

# ----------------------------
# Negative Test Cases
# ----------------------------

def test_negative_offset_rejected():
    with pytest.raises(ValueError):
        QuerySpec(entity='Account', offset=-1)


def test_bad_sort_direction_rejected():
    with pytest.raises(ValueError):
        QuerySpec(entity='Account', sort_direction='SIDEWAYS')


def test_negative_limit_rejected():
    with pytest.raises(ValueError):
        QuerySpec(entity='Account', limit=-5)
