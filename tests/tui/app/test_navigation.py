"""Tests for cursor movement and group expansion keys."""

import pytest

from gitme.gateway.github.fake import FakePrDataSource, make_pull_request
from gitme.gateway.github.types import Role
from gitme.tui.selection.types import HeaderRow, PullRequestRow
from gitme.tui.widgets.details_panel import DetailsPanel
from gitme.tui.widgets.pr_table import PullRequestTable
from tests.fakes.config import make_config, make_repository
from tests.fakes.dash import API, WEB, make_dash_app, settle


class TestNavigation:
    """Tests for j/k/n/p/d/u and enter/e/c."""

    @pytest.mark.asyncio
    async def test_enter_expands_selected_group(self) -> None:
        """Enter on a header shows its pull requests, newest first."""
        app = make_dash_app().app

        async with app.run_test() as pilot:
            await settle(app, pilot)

            await pilot.press("enter")
            await pilot.pause()

            rows = app.dashboard.active.rows()
            assert isinstance(rows[0], HeaderRow) and rows[0].expanded
            assert [row.pull_request.number for row in rows if isinstance(row, PullRequestRow)] == [
                1,
                2,
            ]
            assert app.dashboard.active.selected_index == 0
            assert app.query_one(PullRequestTable).row_count == 4

    @pytest.mark.asyncio
    async def test_enter_on_pull_request_collapses_group(self) -> None:
        """Enter on a pull request collapses its group, keeping the header selected."""
        app = make_dash_app().app

        async with app.run_test() as pilot:
            await settle(app, pilot)

            await pilot.press("enter", "j", "enter")
            await pilot.pause()

            row = app.dashboard.active.selected_row()
            assert isinstance(row, HeaderRow)
            assert row.repo_id == API
            assert not row.expanded

    @pytest.mark.asyncio
    async def test_j_and_k_move_without_wrapping(self) -> None:
        """The cursor stops at the first and last rows."""
        app = make_dash_app().app

        async with app.run_test() as pilot:
            await settle(app, pilot)

            await pilot.press("k")
            await pilot.pause()
            assert app.dashboard.active.selected_index == 0

            await pilot.press("j", "j", "j")
            await pilot.pause()
            assert app.dashboard.active.selected_index == 1

    @pytest.mark.asyncio
    async def test_arrow_keys_move_cursor(self) -> None:
        """Down and up behave like j and k."""
        app = make_dash_app().app

        async with app.run_test() as pilot:
            await settle(app, pilot)

            await pilot.press("down")
            await pilot.pause()
            assert app.dashboard.active.selected_index == 1

            await pilot.press("up")
            await pilot.pause()
            assert app.dashboard.active.selected_index == 0

    @pytest.mark.asyncio
    async def test_n_and_p_jump_between_headers(self) -> None:
        """n and p move to the next and previous repository header."""
        app = make_dash_app().app

        async with app.run_test() as pilot:
            await settle(app, pilot)
            await pilot.press("enter")
            await pilot.pause()

            await pilot.press("n")
            await pilot.pause()
            row = app.dashboard.active.selected_row()
            assert isinstance(row, HeaderRow) and row.repo_id == WEB

            await pilot.press("p")
            await pilot.pause()
            row = app.dashboard.active.selected_row()
            assert isinstance(row, HeaderRow) and row.repo_id == API

    @pytest.mark.asyncio
    async def test_d_and_u_page_through_rows(self) -> None:
        """d and u move by a page, clamped to the row range."""
        repos = [make_repository(f"acme/repo{i}") for i in range(15)]
        source = FakePrDataSource()
        app = make_dash_app(make_config(*repos), source).app

        async with app.run_test() as pilot:
            await settle(app, pilot)

            await pilot.press("d")
            await pilot.pause()
            assert app.dashboard.active.selected_index == 10

            await pilot.press("d")
            await pilot.pause()
            assert app.dashboard.active.selected_index == 14

            await pilot.press("u")
            await pilot.pause()
            assert app.dashboard.active.selected_index == 4

    @pytest.mark.asyncio
    async def test_expand_all_and_collapse_all(self) -> None:
        """e expands every group and c collapses them again."""
        app = make_dash_app().app

        async with app.run_test() as pilot:
            await settle(app, pilot)

            await pilot.press("e")
            await pilot.pause()
            assert all(
                row.expanded for row in app.dashboard.active.rows() if isinstance(row, HeaderRow)
            )
            assert len(app.dashboard.active.rows()) == 4

            await pilot.press("c")
            await pilot.pause()
            assert len(app.dashboard.active.rows()) == 2

    @pytest.mark.asyncio
    async def test_selection_follows_pull_request_across_refresh(self) -> None:
        """A refresh that reorders pull requests keeps the same one selected."""
        harness = make_dash_app()
        app = harness.app

        async with app.run_test() as pilot:
            await settle(app, pilot)
            await pilot.press("enter", "j", "j")
            await pilot.pause()
            selected = app.dashboard.active.selected_pull_request()
            assert selected is not None and selected.number == 2

            harness.source.set_pull_requests(
                Role.REVIEW_REQUESTED,
                API,
                [
                    make_pull_request(2, "Add docs", repository=API, day=9),
                    make_pull_request(1, "Fix login", repository=API, day=2),
                    make_pull_request(5, "Bump", repository=API, day=5),
                ],
            )
            await pilot.press("f")
            await settle(app, pilot)

            selected = app.dashboard.active.selected_pull_request()
            assert selected is not None and selected.number == 2
            assert app.dashboard.active.selected_index == 1

    @pytest.mark.asyncio
    async def test_selected_pull_request_removed_falls_back_to_header(self) -> None:
        """When the selected pull request disappears the header is selected."""
        harness = make_dash_app()
        app = harness.app

        async with app.run_test() as pilot:
            await settle(app, pilot)
            await pilot.press("enter", "j")
            await pilot.pause()

            harness.source.set_pull_requests(Role.REVIEW_REQUESTED, API, [])
            await pilot.press("f")
            await settle(app, pilot)

            row = app.dashboard.active.selected_row()
            assert isinstance(row, HeaderRow) and row.repo_id == API

    @pytest.mark.asyncio
    async def test_ctrl_d_scrolls_details_until_new_selection(self) -> None:
        """ctrl+d/ctrl+u move through a long description; moving the cursor resets it."""
        body = "\n".join(f"line {i}" for i in range(20))
        source = FakePrDataSource(
            {
                (Role.REVIEW_REQUESTED, API): [
                    make_pull_request(1, "Long one", repository=API, body=body, day=2),
                    make_pull_request(2, "Short one", repository=API, day=1),
                ],
            }
        )
        app = make_dash_app(source=source).app

        async with app.run_test() as pilot:
            await settle(app, pilot)
            await pilot.press("enter", "j")
            await pilot.pause()
            panel = app.query_one(DetailsPanel)

            await pilot.press("ctrl+d", "ctrl+d")
            await pilot.pause()
            assert panel.body_offset == 6

            await pilot.press("ctrl+u")
            await pilot.pause()
            assert panel.body_offset == 3

            await pilot.press("j")
            await pilot.pause()
            assert panel.body_offset == 0
