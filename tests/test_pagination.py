import pytest

from securepass.core.pagination import DEFAULT_PAGE_SIZE, PaginationView


@pytest.fixture
def view():
    view = PaginationView(50)
    view.update(list(range(1, 121)))
    return view


class TestPaginationView:
    def test_defaults(self):
        assert PaginationView().page_size == DEFAULT_PAGE_SIZE == 50

    def test_page_count(self, view):
        assert view.page_count == 3
        assert view.label == "Page 1 of 3"
        assert view.items == list(range(1, 51))

    def test_go_to_past_end_clamps(self, view):
        assert view.go_to(4) == 3
        assert view.items == list(range(101, 121))
        assert view.go_to(0) == 1

    def test_empty(self):
        view = PaginationView(10)
        view.update([])
        assert view.page_count == 0
        assert view.label == "Page 0 of 0"
        assert view.items == []
        assert not view.has_next and not view.has_previous

    def test_next_and_previous_stop_at_bounds(self, view):
        assert view.previous() == 1
        view.next()
        view.next()
        assert view.next() == 3
        assert not view.has_next
        assert view.previous() == 2

    def test_page_size_change_resets_to_first_page(self, view):
        view.go_to(3)
        view.set_page_size(10)
        assert view.current_page == 1
        assert view.page_count == 12

    def test_invalid_page_size(self, view):
        with pytest.raises(ValueError):
            view.set_page_size(25)
        with pytest.raises(ValueError):
            PaginationView(7)

    def test_update_clamps_when_list_shrinks(self, view):
        view.go_to(3)
        view.update(list(range(60)))
        assert view.current_page == 2

    def test_update_with_reset(self, view):
        view.go_to(2)
        view.update(list(range(120)), reset=True)
        assert view.current_page == 1
