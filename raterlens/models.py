"""Pydantic models for evaluator profiles and extracted feedback."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class WeightComponents(BaseModel):
    """Precomputed expertise weight breakdown stored on some profiles."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    final_weight: float | None = Field(default=None, alias="finalWeight")


class EvaluatorProfile(BaseModel):
    """Evaluator profile (the ``userInfo`` block of an evaluation)."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    role: str | None = None
    domain_expertise: str | None = Field(default=None, alias="domainExpertise")
    evaluation_experience: str | None = Field(default=None, alias="evaluationExperience")
    orkg_experience: str | None = Field(default=None, alias="orkgExperience")
    expertise_weight: float | None = Field(default=None, alias="expertiseWeight")
    weight_components: WeightComponents | None = Field(default=None, alias="weightComponents")
    email: str | None = None
    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")

    @property
    def identity(self) -> str | None:
        """Email if present, else "first last"."""
        if self.email and self.email.strip():
            return self.email.strip()
        full_name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return full_name or None


class ExpertiseClass(BaseModel):
    """Coarse expertise bucket derived from an evaluator profile."""
    model_config = ConfigDict(frozen=True)

    tier: str
    composite_score: float
    level: str
    display_label: str
    credibility_statement: str
    raw_role: str | None = None
    raw_domain_expertise: str | None = None
    raw_evaluation_experience: str | None = None


class Comment(BaseModel):
    """Atomic feedback unit extracted from one evaluation."""
    model_config = ConfigDict(frozen=True)

    id: str
    component: str
    component_name: str
    subfield: str
    text: str
    rating: float | None
    evaluator: str | None
    evaluation_token: str
    paper_id: str
    paper_title: str | None
    paper_doi: str | None
    timestamp: datetime | None
    expertise: ExpertiseClass
    role: str = "Unknown"

    @property
    def tier(self) -> str:
        return self.expertise.tier

    @property
    def rater(self) -> str:
        """Identity used when counting distinct raters."""
        return self.evaluator or self.evaluation_token
