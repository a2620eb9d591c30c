# stitch/stitch_io/documents.py
# Document export for resume JSON: DOCX rendering via python-docx & zip bundling

import zipfile
from pathlib import Path
from typing import Any, Iterable, List

from docx import Document

from ..core.exceptions import DocumentError, FileWriteError
from ..core.verbose import vlog_file_write
from .generics import ensure_parent


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _join(parts: Iterable[Any], sep: str = " | ") -> str:
    return sep.join(t for t in (_text(p) for p in parts) if t)


def _date_span(item: dict[str, Any], start_key: str, end_key: str) -> str:
    start = _text(item.get(start_key))
    end = _text(item.get(end_key))
    if start and end:
        return f"{start} - {end}"
    return start or end


def _add_experiences(doc: Any, experiences: List[Any]) -> None:
    doc.add_heading("Experience", level=1)
    for exp in experiences:
        if not isinstance(exp, dict):
            continue
        header = _join([exp.get("title"), exp.get("company")], " - ")
        if header:
            doc.add_heading(header, level=2)
        meta = _join([exp.get("location"), _date_span(exp, "startDate", "endDate")])
        if meta:
            doc.add_paragraph(meta)
        for achievement in exp.get("achievements") or []:
            if _text(achievement):
                doc.add_paragraph(_text(achievement), style="List Bullet")


def _add_education(doc: Any, education: List[Any]) -> None:
    doc.add_heading("Education", level=1)
    for edu in education:
        if not isinstance(edu, dict):
            continue
        degree = _join([edu.get("degree"), edu.get("field")], " in ")
        line = _join([degree, edu.get("institution"), edu.get("graduationDate")])
        if line:
            doc.add_paragraph(line)


def _add_skills(doc: Any, skills: Any) -> None:
    doc.add_heading("Skills", level=1)
    if isinstance(skills, dict):
        for group, values in skills.items():
            if isinstance(values, list) and values:
                doc.add_paragraph(f"{group.title()}: {_join(values, ', ')}")
    elif isinstance(skills, list):
        doc.add_paragraph(_join(skills, ", "))


def _add_projects(doc: Any, projects: List[Any]) -> None:
    doc.add_heading("Projects", level=1)
    for proj in projects:
        if not isinstance(proj, dict):
            continue
        if _text(proj.get("name")):
            doc.add_heading(_text(proj.get("name")), level=2)
        if _text(proj.get("description")):
            doc.add_paragraph(_text(proj.get("description")))
        tech = proj.get("technologies") or []
        if tech:
            doc.add_paragraph(f"Technologies: {_join(tech, ', ')}")


# * Render resume JSON to a DOCX file
def write_resume_docx(resume: dict[str, Any], output_path: Path) -> None:
    if not isinstance(resume, dict):
        raise DocumentError(f"Resume must be an object, got {type(resume).__name__}")

    doc = Document()
    contact = resume.get("contact") or {}

    doc.add_heading(_text(contact.get("name")) or "Resume", level=0)
    contact_line = _join(
        [
            contact.get("email"),
            contact.get("phone"),
            contact.get("location"),
            contact.get("linkedin"),
            contact.get("website"),
        ]
    )
    if contact_line:
        doc.add_paragraph(contact_line)

    if _text(resume.get("summary")):
        doc.add_heading("Summary", level=1)
        doc.add_paragraph(_text(resume.get("summary")))

    if resume.get("experiences"):
        _add_experiences(doc, resume["experiences"])

    if resume.get("education"):
        _add_education(doc, resume["education"])

    if resume.get("skills"):
        _add_skills(doc, resume["skills"])

    certifications = resume.get("certifications") or []
    if certifications:
        doc.add_heading("Certifications", level=1)
        for cert in certifications:
            label = cert.get("name") if isinstance(cert, dict) else cert
            if _text(label):
                doc.add_paragraph(_text(label), style="List Bullet")

    if resume.get("projects"):
        _add_projects(doc, resume["projects"])

    output_path = Path(output_path)
    ensure_parent(output_path)
    try:
        doc.save(str(output_path))
    except OSError as e:
        raise FileWriteError(f"Could not write {output_path}: {e}", output_path) from e
    vlog_file_write(output_path)


# * Bundle exported files into a single zip archive
def bundle_exports(paths: List[Path], output_zip: Path) -> Path:
    output_zip = Path(output_zip)
    ensure_parent(output_zip)
    seen: set[str] = set()
    try:
        with zipfile.ZipFile(output_zip, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for path in paths:
                path = Path(path)
                # keep archive names unique when inputs share a basename
                name = path.name
                counter = 1
                while name in seen:
                    name = f"{path.stem}-{counter}{path.suffix}"
                    counter += 1
                seen.add(name)
                zf.write(path, arcname=name)
    except OSError as e:
        raise FileWriteError(f"Could not write {output_zip}: {e}", output_zip) from e
    vlog_file_write(output_zip, output_zip.stat().st_size)
    return output_zip
