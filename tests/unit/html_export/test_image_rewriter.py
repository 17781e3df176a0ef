"""Unit tests for html_export.image_rewriter module."""

import logging

import pytest
from bs4 import BeautifulSoup

from confluence_export.html_export.image_rewriter import (
    FALLBACK_FILENAME,
    ImageRewriter,
    extract_filename,
)


def img_sources(html):
    return [img.get('src') for img in BeautifulSoup(html, 'lxml').find_all('img')]


class TestExtractFilename:
    """Test cases for extract_filename."""

    @pytest.mark.parametrize('url,expected', [
        ('/download/attachments/1/chart.png', 'chart.png'),
        ('/download/attachments/1/my%20chart.png?version=2&api=v2', 'my chart.png'),
        ('https://x.atlassian.net/wiki/download/thumbnails/1/a.jpg#frag', 'a.jpg'),
    ])
    def test_last_segment_decoded(self, url, expected):
        assert extract_filename(url) == expected

    def test_no_filename_falls_back(self):
        assert extract_filename('https://x.atlassian.net/') == FALLBACK_FILENAME

    def test_undecodable_name_falls_back_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert extract_filename('/download/attachments/1/a%FF.png') == FALLBACK_FILENAME

        assert 'Failed to extract filename' in caplog.text


class TestImageRewriter:
    """Test cases for ImageRewriter.rewrite."""

    def test_empty_input(self):
        result = ImageRewriter().rewrite('')

        assert result.html == ''
        assert result.image_urls == []

    def test_sources_rewritten_to_local_files(self):
        src = '/download/attachments/1/my%20chart.png?version=2'
        html = f'<p>Intro</p><p><img src="{src}" alt="chart"></p>'

        result = ImageRewriter().rewrite(html)

        assert img_sources(result.html) == ['./my chart.png']
        assert result.image_urls == [src]
        assert 'Intro' in result.html

    def test_filename_sanitized_like_attachments(self):
        result = ImageRewriter().rewrite('<img src="/download/attachments/1/a%3Ab.png">')

        assert img_sources(result.html) == ['./a_b.png']

    def test_image_without_src_untouched(self):
        result = ImageRewriter().rewrite('<img alt="none"><img src="/x/b.gif">')

        assert img_sources(result.html) == [None, './b.gif']
        assert result.image_urls == ['/x/b.gif']

    def test_fragment_not_wrapped_in_document(self):
        result = ImageRewriter().rewrite('<p>hello</p>')

        assert result.html == '<p>hello</p>'
