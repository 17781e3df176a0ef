"""Unit tests for html_export.exporter module."""

import asyncio

import pytest
from unittest.mock import Mock

from confluence_export.confluence_client.errors import (
    APIAccessError,
    InvalidCredentialsError,
    RemoteFetchError,
)
from confluence_export.html_export.errors import FilesystemError
from confluence_export.html_export.exporter import INDEX_FILENAME, SpaceExporter
from confluence_export.page_tree.builder import PageTreeBuilder
from confluence_export.page_tree.directory import PageDirectory
from confluence_export.page_tree.errors import DataInconsistencyError


def run(coro):
    """Run async code in tests without pytest-asyncio."""
    return asyncio.run(coro)


def create_mock_api(pages, children, attachments=None):
    """Mock APIWrapper serving a small space.

    Args:
        pages: List of (id, title) tuples returned by the space listing
        children: Dict of page id -> list of (id, title) children
        attachments: Dict of page id -> list of attachment dicts
    """
    attachments = attachments or {}
    api = Mock()

    def list_pages(space_key, start=0, limit=100):
        return [{'id': page_id, 'title': title} for page_id, title in pages][start:start + limit]

    def get_children(page_id, child_type='page', start=0, limit=100):
        return {'results': [
            {'id': child_id, 'title': title} for child_id, title in children.get(page_id, [])
        ][start:start + limit]}

    def get_page(page_id, expand=None):
        value = (
            f'<p>Body of {page_id}</p>'
            f'<img src="/download/attachments/{page_id}/pic.png?version=1">'
        )
        return {'id': page_id, 'body': {'export_view': {'value': value}}}

    def get_attachments(page_id, start=0, limit=100):
        return {'results': attachments.get(page_id, [])[start:start + limit]}

    api.get_all_pages_from_space.side_effect = list_pages
    api.get_page_child_by_type.side_effect = get_children
    api.get_page_by_id.side_effect = get_page
    api.get_attachments_from_content.side_effect = get_attachments
    api.download_attachment.return_value = b'PNG'
    return api


def attachment(title, link=True):
    data = {'title': title, '_links': {}}
    if link:
        data['_links']['download'] = f'/download/attachments/1/{title}'
    return data


def make_exporter(api, output_dir, **kwargs):
    return SpaceExporter(api, PageDirectory(api, 'TEAM'), output_dir, **kwargs)


class TestExport:
    """End-to-end export against a mocked API."""

    def setup_method(self):
        self.api = create_mock_api(
            pages=[('1', 'Home'), ('2', 'Guide')],
            children={'1': [('2', 'Guide')]},
            attachments={'1': [attachment('pic.png')]},
        )

    def test_writes_page_files_and_index(self, tmp_path):
        out = tmp_path / 'out'

        result = run(make_exporter(self.api, out).export())

        assert result.index_path == out / INDEX_FILENAME
        assert (out / 'Home' / 'Home.html').is_file()
        assert (out / 'Guide' / 'Guide.html').is_file()
        assert result.pages_written == 2
        assert [n.page_id for n in result.forest] == ['1']
        assert [c.page_id for c in result.forest[0].children] == ['2']

    def test_index_links_nested_pages(self, tmp_path):
        out = tmp_path / 'out'

        run(make_exporter(self.api, out).export())

        index = (out / INDEX_FILENAME).read_text(encoding='utf-8')
        assert (
            '<ul><li><a href="./Home/Home.html">Home</a>'
            '<ul><li><a href="./Guide/Guide.html">Guide</a></li></ul></li></ul>'
        ) in index

    def test_page_body_has_local_images(self, tmp_path):
        out = tmp_path / 'out'

        run(make_exporter(self.api, out).export())

        page = (out / 'Home' / 'Home.html').read_text(encoding='utf-8')
        assert 'Body of 1' in page
        assert 'src="./pic.png"' in page
        assert '<span id="title-text">Home</span>' in page

    def test_attachments_downloaded_next_to_page(self, tmp_path):
        out = tmp_path / 'out'

        result = run(make_exporter(self.api, out).export())

        assert (out / 'Home' / 'pic.png').read_bytes() == b'PNG'
        assert result.attachments_written == 1
        self.api.download_attachment.assert_called_once_with('/download/attachments/1/pic.png')

    def test_build_stats_reported(self, tmp_path):
        result = run(make_exporter(self.api, tmp_path / 'out').export())

        assert result.stats.fetch_count == 2
        assert result.stats.node_count == 2
        assert result.stats.root_count == 1

    def test_callback_called_per_page(self, tmp_path):
        exported = []

        run(make_exporter(self.api, tmp_path / 'out', on_page_exported=exported.append).export())

        assert [n.page_id for n in exported] == ['1', '2']

    def test_index_only_without_content(self, tmp_path):
        out = tmp_path / 'out'

        result = run(make_exporter(self.api, out, include_content=False).export())

        assert (out / INDEX_FILENAME).is_file()
        assert not (out / 'Home').exists()
        assert result.pages_written == 0
        self.api.get_page_by_id.assert_not_called()

    def test_attachments_can_be_disabled(self, tmp_path):
        result = run(make_exporter(self.api, tmp_path / 'out', include_attachments=False).export())

        assert result.attachments_written == 0
        self.api.get_attachments_from_content.assert_not_called()


class TestAttachmentFailures:
    """Attachments that cannot be downloaded are skipped, not fatal."""

    def test_failed_download_is_skipped(self, tmp_path):
        api = create_mock_api([('1', 'Home')], {}, {'1': [attachment('a.pdf'), attachment('b.png')]})
        api.download_attachment.side_effect = [APIAccessError('boom'), b'IMG']
        out = tmp_path / 'out'

        result = run(make_exporter(api, out).export())

        assert result.attachments_skipped == ['a.pdf']
        assert result.attachments_written == 1
        assert not (out / 'Home' / 'a.pdf').exists()
        assert (out / 'Home' / 'b.png').read_bytes() == b'IMG'

    def test_rejected_credentials_abort_export(self, tmp_path):
        api = create_mock_api([('1', 'Home')], {}, {'1': [attachment('a.pdf'), attachment('b.png')]})
        api.download_attachment.side_effect = InvalidCredentialsError('user@example.com', 'https://x')
        out = tmp_path / 'out'

        with pytest.raises(InvalidCredentialsError):
            run(make_exporter(api, out).export())

        assert api.download_attachment.call_count == 1
        assert not (out / INDEX_FILENAME).exists()

    def test_attachment_without_link_is_skipped(self, tmp_path):
        api = create_mock_api([('1', 'Home')], {}, {'1': [attachment('x.png', link=False)]})

        result = run(make_exporter(api, tmp_path / 'out').export())

        assert result.attachments_skipped == ['x.png']
        api.download_attachment.assert_not_called()


class TestExportLayout:
    """Directory naming and failure behaviour."""

    def test_duplicate_titles_get_distinct_directories(self, tmp_path):
        api = create_mock_api([('1', 'Notes'), ('2', 'Notes')], {})
        out = tmp_path / 'out'

        run(make_exporter(api, out).export())

        assert (out / 'Notes' / 'Notes.html').is_file()
        assert (out / 'Notes_2' / 'Notes_2.html').is_file()

    def test_attachment_named_like_page_file_keeps_page(self, tmp_path):
        api = create_mock_api([('1', 'Home')], {}, {'1': [attachment('home.HTML')]})
        api.download_attachment.return_value = b'<html>attached</html>'
        out = tmp_path / 'out'

        result = run(make_exporter(api, out).export())

        assert 'Body of 1' in (out / 'Home' / 'Home.html').read_text(encoding='utf-8')
        assert (out / 'Home' / 'Home_attachment.html').read_bytes() == b'<html>attached</html>'
        assert result.attachments_written == 1

    def test_attachments_paginated_until_empty_batch(self, tmp_path):
        titles = [f'file{i}.txt' for i in range(150)]
        api = create_mock_api([('1', 'Home')], {}, {'1': [attachment(t) for t in titles]})
        out = tmp_path / 'out'

        result = run(make_exporter(api, out).export())

        assert result.attachments_written == 150
        assert (out / 'Home' / 'file149.txt').is_file()

    def test_prebuilt_forest_is_not_rebuilt(self, tmp_path):
        api = create_mock_api([('1', 'Home')], {})
        exporter = make_exporter(api, tmp_path / 'out')
        forest = run(exporter.build_tree())
        api.get_all_pages_from_space.reset_mock()

        result = run(exporter.export(forest))

        assert result.forest is forest
        assert result.pages_written == 1
        api.get_all_pages_from_space.assert_not_called()

    def test_child_fetch_failure_aborts_before_writing(self, tmp_path):
        api = create_mock_api([('1', 'Home')], {})
        api.get_page_child_by_type.side_effect = RuntimeError('connection reset')
        out = tmp_path / 'out'

        with pytest.raises(RemoteFetchError):
            run(make_exporter(api, out).export())

        assert not (out / INDEX_FILENAME).exists()
        api.get_page_by_id.assert_not_called()

    def test_strict_builder_propagates_inconsistency(self, tmp_path):
        api = create_mock_api([('1', 'A'), ('2', 'B')], {'1': [('3', 'C')], '2': [('3', 'C')]})
        exporter = make_exporter(api, tmp_path / 'out', builder=PageTreeBuilder(strict=True))

        with pytest.raises(DataInconsistencyError):
            run(exporter.export())

    def test_unwritable_output_raises_filesystem_error(self, tmp_path):
        blocker = tmp_path / 'blocker'
        blocker.write_text('not a directory')

        with pytest.raises(FilesystemError) as exc_info:
            run(make_exporter(create_mock_api([], {}), blocker).export())

        assert exc_info.value.operation == 'mkdir'
