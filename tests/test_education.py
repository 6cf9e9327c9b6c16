from __future__ import annotations

import pytest

from extraction.education import extract_latest_education, passout_year_from_text, qualification_code
from extraction.page import PageContext

PROFILE_URL = "https://www.linkedin.com/in/test-candidate/"


@pytest.mark.parametrize(
    "text,expected",
    [
        ("2015 - 2019", "2019"),
        ("Jun 2017 – May 2021", "2021"),
        ("Pin 201301, 2019", "2019"),
        ("560034, 2021", "2021"),
        ("Graduated 2012", "2012"),
        ("Grade: 8.9", ""),
        ("", ""),
        (None, ""),
    ],
)
def test_passout_year_from_text(text, expected):
    assert passout_year_from_text(text) == expected


@pytest.mark.parametrize(
    "degree,expected",
    [
        ("Bachelor of Engineering - BE, Computer Science", "BE"),
        ("B.Tech, Mechanical Engineering", "BTECH"),
        ("Master of Business Administration - MBA", "MBA"),
        ("B.E. Electronics", "BE"),
        ("Bachelor of Technology", "BTECH"),
        ("Master of Science", "MSC"),
        ("High School", ""),
        ("", ""),
    ],
)
def test_qualification_code(degree, expected):
    assert qualification_code(degree) == expected


def test_latest_education_from_structured_entry():
    html = (
        '<html><body><section><div id="education"></div><h2>Education</h2><ul>'
        '<li class="artdeco-list__item"><div class="pvs-entity">'
        '<a href="/school/iitd"><span aria-hidden="true">IIT Delhi</span></a>'
        '<span class="t-14 t-normal"><span aria-hidden="true">B.Tech, Mechanical Engineering</span></span>'
        '<span class="t-14 t-normal t-black--light"><span aria-hidden="true">2015 - 2019</span></span>'
        "</div></li>"
        '<li class="artdeco-list__item"><div class="pvs-entity">'
        '<a href="/school/dps"><span aria-hidden="true">Delhi Public School</span></a>'
        "</div></li>"
        "</ul></section></body></html>"
    )
    entry = extract_latest_education(PageContext.from_html(html, url=PROFILE_URL))
    assert entry.school == "IIT Delhi"
    assert entry.degree == "B.Tech, Mechanical Engineering"
    assert entry.qualification_code == "BTECH"
    assert entry.passout_year == "2019"


def test_latest_education_falls_back_to_lines():
    html = (
        "<html><body><section><h2>Education</h2><ul>"
        '<li class="artdeco-list__item">'
        "<div>Delhi Public School</div><div>Intermediate, Science</div><div>Noida 201301, 2011</div>"
        "</li></ul></section></body></html>"
    )
    entry = extract_latest_education(PageContext.from_html(html, url=PROFILE_URL))
    assert entry.school == "Delhi Public School"
    assert entry.degree == "Intermediate, Science"
    assert entry.passout_year == "2011"


def test_latest_education_missing_section():
    entry = extract_latest_education(PageContext.from_html("<html><body></body></html>", url=PROFILE_URL))
    assert entry.school == entry.degree == entry.qualification_code == entry.passout_year == ""
