"""
services/navigation.py

Subject sections and the forward auto-advance rule.
Pure functions, no session state.

Save & Next / Mark & Next walk a section to its end and then jump to the
start of the next section. Previous and direct palette selection are not
restricted and do not go through here.
"""

from typing import List, Optional, Sequence

from testprep_cbt.models.question_model import Question
from testprep_cbt.models.session_state import SubjectSection


def compute_subject_sections(questions: Sequence[Question]) -> List[SubjectSection]:
    """
    Split the question order into contiguous runs of the same subject.

    A subject that reappears later in the set opens a new section.
    Returns an empty list for an empty question set.
    """
    sections: List[SubjectSection] = []
    start = 0
    for i in range(1, len(questions) + 1):
        if i == len(questions) or questions[i].subject != questions[start].subject:
            sections.append(SubjectSection(
                name=questions[start].subject,
                start_index=start,
                end_index=i - 1,
                count=i - start,
            ))
            start = i
    return sections


def section_for_index(
    sections: Sequence[SubjectSection], index: int
) -> Optional[SubjectSection]:
    """Section containing ``index``, or None."""
    for section in sections:
        if section.start_index <= index <= section.end_index:
            return section
    return None


def next_index(index: int, total: int, sections: Sequence[SubjectSection]) -> Optional[int]:
    """
    Index reached by forward auto-advance from ``index``.

    Returns:
        None at the last index (the caller shows Submit instead of Next).
        The next section's start when ``index`` closes its section.
        ``index + 1`` otherwise.
    """
    if index >= total - 1:
        return None

    if len(sections) > 1:
        for pos, section in enumerate(sections):
            if section.start_index <= index <= section.end_index:
                if index == section.end_index and pos + 1 < len(sections):
                    return sections[pos + 1].start_index
                break

    return index + 1
