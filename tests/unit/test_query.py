"""
Unit tests for paging and ordering of queries.
"""
import pytest

from ordersvc.query.order import ASC, DESC, OrderBy, QueryVocabulary
from ordersvc.query.page import DEFAULT_ROWS, MAX_ROWS, Page
from ordersvc.query.result import QueryResult


class TestPage:

    def test_defaults(self):
        page = Page.parse(None, None)
        assert page.number == 1
        assert page.rows_per_page == DEFAULT_ROWS
        assert page.offset == 0

    def test_blank_values_use_defaults(self):
        assert Page.parse('', '  ') == Page(1, DEFAULT_ROWS)

    def test_offset(self):
        assert Page.parse('3', '20').offset == 40

    def test_max_rows_allowed(self):
        assert Page.parse('1', str(MAX_ROWS)).rows_per_page == MAX_ROWS

    @pytest.mark.parametrize('page,rows,message', [
        ('0', '10', 'page value too small'),
        ('1', '0', 'rows value too small'),
        ('1', str(MAX_ROWS + 1), 'rows value too large'),
        ('abc', '10', 'page conversion'),
        ('1', 'x', 'rows conversion'),
    ])
    def test_invalid_values(self, page, rows, message):
        with pytest.raises(ValueError) as exc:
            Page.parse(page, rows)
        assert message in str(exc.value)


@pytest.fixture
def vocabulary():
    return QueryVocabulary(
        fields={'sale_id': 'id', 'amount': 'amount'},
        default=OrderBy('id', ASC),
    )


class TestOrderBy:

    def test_blank_gives_default(self, vocabulary):
        assert vocabulary.parse('') == OrderBy('id', ASC)
        assert vocabulary.parse(None) == OrderBy('id', ASC)

    def test_field_only_is_ascending(self, vocabulary):
        assert vocabulary.parse('amount') == OrderBy('amount', ASC)

    def test_direction_is_case_insensitive(self, vocabulary):
        assert vocabulary.parse('amount,desc') == OrderBy('amount', DESC)

    def test_public_name_maps_to_internal_field(self, vocabulary):
        assert vocabulary.parse('sale_id,DESC').field == 'id'

    def test_unknown_field(self, vocabulary):
        with pytest.raises(ValueError, match='unknown order: price'):
            vocabulary.parse('price,ASC')

    def test_internal_name_is_not_public(self, vocabulary):
        with pytest.raises(ValueError, match='unknown order'):
            vocabulary.parse('id')

    def test_unknown_direction(self, vocabulary):
        with pytest.raises(ValueError, match='unknown direction: sideways'):
            vocabulary.parse('amount,sideways')

    def test_too_many_parts(self, vocabulary):
        with pytest.raises(ValueError):
            vocabulary.parse('amount,ASC,extra')


class TestQueryVocabulary:

    def test_fields_are_read_only(self, vocabulary):
        with pytest.raises(TypeError):
            vocabulary.fields['hack'] = 'password_hash'

    def test_source_mapping_changes_do_not_leak(self):
        source = {'name': 'name'}
        vocab = QueryVocabulary(fields=source, default=OrderBy('name'))
        source['secret'] = 'secret'
        assert 'secret' not in vocab.fields

    def test_default_must_be_sortable(self):
        with pytest.raises(ValueError):
            QueryVocabulary(fields={'name': 'name'}, default=OrderBy('id'))


def test_query_result_shape():
    result = QueryResult(items=[{'id': 1}], total=11, page=Page(2, 10))
    assert result.to_dict() == {'items': [{'id': 1}], 'total': 11, 'page': 2, 'rowsPerPage': 10}
