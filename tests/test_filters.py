from filters import absolute_url, clean_line, clean_text, extract_tags, is_absolute_url


def test_clean_text_keeps_paragraphs():
    assert clean_text("  a \n\n\n  b  \n c ") == "a\n\nb\nc"


def test_clean_text_collapses_inline_whitespace():
    assert clean_text("one\t  two   three\r\n\r\n\r\nfour") == "one two three\n\nfour"
    assert clean_text("") == ""
    assert clean_text(None) == ""


def test_clean_line_flattens_newlines():
    assert clean_line("  Drake \n Drops  New\tSingle ") == "Drake Drops New Single"


def test_tags_leading_name_before_separator():
    assert extract_tags("Drake - New Single Out Now") == ["Drake"]
    assert extract_tags("Jay-Z - Reasonable Doubt Anniversary") == ["Jay-Z"]
    assert extract_tags("Nas: Illmatic Live From Kennedy Center") == ["Nas"]


def test_tags_leading_name_before_release_verb():
    assert extract_tags('Kendrick Lamar Drops "GNX" featuring SZA') == ["Kendrick Lamar", "GNX", "SZA"]
    assert extract_tags("Doechii releases new mixtape") == ["Doechii"]


def test_tags_quoted_before_credits():
    tags = extract_tags('featuring "Jay Z" and ft. Nas - New Song')
    assert tags == ["Jay Z", "Nas - New Song"]


def test_tags_quoted_length_bounds():
    assert extract_tags('New "EP" and "Blonde"') == ["Blonde"]


def test_tags_are_unique_and_capped():
    title = 'Future Shares "Metro" with Metro Boomin "Uno" "Dos" "Tres" "Cuatro"'
    tags = extract_tags(title)
    assert tags == ["Future", "Metro", "Uno", "Dos", "Tres"]
    assert len(tags) == 5


def test_tags_empty_title():
    assert extract_tags("") == []
    assert extract_tags("no names here at all") == []


def test_absolute_url_resolves_relative_paths():
    assert absolute_url("/music/story", "https://hypebeast.com") == "https://hypebeast.com/music/story"
    assert absolute_url("https://cdn.example.com/a", "https://hypebeast.com") == "https://cdn.example.com/a"
    assert absolute_url("", "https://hypebeast.com") == ""


def test_is_absolute_url():
    assert is_absolute_url("https://24hip-hop.com/x")
    assert not is_absolute_url("/x")
    assert not is_absolute_url("data:image/gif;base64,AAAA")
