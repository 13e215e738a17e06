"""
Industry Alignment Resolver
Quante esperienze del candidato ricadono nell'industry target (o in industry correlate).
"""

import re
from typing import List, Optional, Sequence, Tuple

from src.models.candidate import WorkEntry
from src.models.match_result import IndustryScore
from src.scorers.common import clamp_score, mentions, normalize_text, unique
from src.services.reference_data import ReferenceData, default_reference_data


# Regole valutate in ordine: vince la prima che corrisponde
INDUSTRY_RULES: Tuple[Tuple[str, "re.Pattern"], ...] = tuple(
    (industry, re.compile(pattern, re.IGNORECASE))
    for industry, pattern in (
        ("Technology", r"developer|engineer|programmer|software|devops|architect|frontend|backend"
                       r"|full.?stack|tech|\bit\b|data.?scientist|analyst.*data"),
        ("Finance", r"financial.*analyst|accountant|auditor|banker|finance|investment|trading"
                    r"|wealth.*management|\bcfa\b|\bcpa\b"),
        ("Healthcare", r"doctor|nurse|physician|surgeon|therapist|medical|healthcare|hospital"
                       r"|clinic|pharmacist"),
        ("Hospitality", r"chef|cook|waiter|waitress|bartender|sommelier|restaurant|hotel"
                        r"|hospitality|catering"),
        ("Sales & Marketing", r"sales|marketing|business.*development|account.*executive"
                              r"|\bsdr\b|\bbdr\b|brand.*manager"),
        ("Education", r"teacher|professor|instructor|lecturer|tutor|educator|principal|academic"),
        ("Construction", r"civil.*engineer|mechanical|construction|architect(?!.*software)"
                         r"|builder|contractor|surveyor"),
        ("Legal", r"lawyer|attorney|legal|counsel|paralegal|judge"),
        ("Human Resources", r"\bhr\b|human.*resources|recruiter|talent.*acquisition"
                            r"|people.*operations"),
        ("Design", r"designer(?!.*software)|ui.*ux|graphic|creative|art.*director|illustrator"),
        ("Manufacturing", r"manufacturing|production|operations.*manager|supply.*chain"
                          r"|logistics|warehouse"),
        ("Customer Service", r"customer.*service|support|helpdesk|service.*desk|client.*success"),
    )
)

MAX_MATCHED_INDUSTRIES = 3


def infer_industry(title: Optional[str]) -> Optional[str]:
    text = normalize_text(title)
    if not text:
        return None
    for industry, pattern in INDUSTRY_RULES:
        if pattern.search(text):
            return industry
    return None


def related_industries(industry: str, reference_data: Optional[ReferenceData] = None) -> Tuple[str, ...]:
    refs = reference_data or default_reference_data()
    entry = refs.industry_relationships.get(industry.strip().lower())
    return entry[1] if entry else ()


def score_industry(
    experience: Sequence[WorkEntry],
    target_industry: Optional[str],
    job_title: Optional[str] = None,
    inference_source: str = "candidate",
    reference_data: Optional[ReferenceData] = None,
) -> IndustryScore:
    if not experience:
        return IndustryScore(score=30, reason="No work experience provided")

    inferred = False
    target = (target_industry or "").strip()
    if not target:
        source_title = job_title if inference_source == "job" else experience[0].title
        target = infer_industry(source_title) or ""
        if not target:
            return IndustryScore(score=60, reason="Industry could not be determined")
        inferred = True

    target_lower = target.lower()
    related = [r.lower() for r in related_industries(target, reference_data)]
    matched: List[str] = []
    direct = 0
    related_count = 0

    for entry in experience:
        company = normalize_text(entry.company)
        title_and_description = f"{normalize_text(entry.title)} {normalize_text(entry.description)}"
        if mentions(title_and_description, target_lower):
            direct += 1
        elif mentions(company, target_lower):
            related_count += 1
        elif any(mentions(title_and_description, r) for r in related):
            related_count += 1
        else:
            continue
        if entry.company:
            matched.append(entry.company)

    if direct:
        score = min(100, 70 + 15 * direct)
        reason = f"{direct} role(s) in target industry"
    elif related_count:
        score = min(60, 35 + 10 * related_count)
        reason = f"{related_count} role(s) in related industries"
    else:
        score = 10
        reason = "No experience in target or related industries"

    return IndustryScore(
        score=clamp_score(score),
        reason=reason,
        target_industry=target,
        inferred=inferred,
        matched_industries=unique(matched)[:MAX_MATCHED_INDUSTRIES],
        direct_matches=direct,
        related_matches=related_count,
    )
