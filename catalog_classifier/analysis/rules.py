# ==============================================
# Rule Chain
# ==============================================
#
# PURPOSE:
#   Takes one ColumnFingerprint and folds a ClassificationResult through
#   an ordered list of heuristic rules. Each rule reads the fingerprint
#   and the result so far, and returns a (possibly) updated result.
#
# CLASS: RuleChain
# ----------------
#   Stateless apart from its thresholds and collaborators.
#
#   Constructor:
#   ------------
#   - __init__(thresholds, naming, eligibility)
#       naming:      (name, base_type) -> SemanticType | None
#       eligibility: (base_type, semantic_type, visibility, name) -> bool
#
#   Methods:
#   --------
#   - classify(fingerprint, seed=None) -> ClassificationResult
#       Fold the seed (default: empty result for fingerprint.id) through
#       self.rules in order:
#
#       RULE 1: initial_guess        → naming heuristic
#       RULE 2: no_preview_display   → long text hidden from previews
#       RULE 3: url_semantic_type    → >95% URLs (fraction scale)
#       RULE 4: json_semantic_type   → exactly 100% JSON, no preview
#       RULE 5: email_semantic_type  → exactly 100% emails, preview
#       RULE 6: category_type        → 0 < cardinality < 300 and eligible
#       RULE 7: primary_key          → always PK if flagged
#       RULE 8: foreign_key          → always FK if flagged (wins over PK)
#
#   Rules 3-6 only act while no semantic type is set. Rules 7-8 overwrite.
#
# ==============================================

import logging
from dataclasses import replace
from functools import reduce
from typing import Callable, List, Optional

from .decision import ClassificationResult, ClassificationThresholds, SemanticType
from .eligibility import should_materialize_values
from .fingerprint import ColumnFingerprint, Visibility, is_textual
from .naming import infer_semantic_type

logger = logging.getLogger(__name__)

NamingHeuristic = Callable[[Optional[str], Optional[str]], Optional[SemanticType]]
EligibilityPredicate = Callable[[Optional[str], Optional[SemanticType], Optional[str], Optional[str]], bool]
Rule = Callable[[ColumnFingerprint, ClassificationResult], ClassificationResult]

EXACT_MATCH_PERCENT = 100


class RuleChain:
    """
    Ordered heuristic rules that infer a column's semantic type and
    preview visibility from its fingerprint.
    """

    def __init__(
        self,
        thresholds: ClassificationThresholds = None,
        naming: NamingHeuristic = None,
        eligibility: EligibilityPredicate = None,
    ):
        """
        Initialize the chain.

        Args:
            thresholds: Optional ClassificationThresholds; defaults are used
                        when omitted (0.95 URL fraction, 300 distinct values,
                        50 characters average length)
            naming: Initial-guess heuristic, defaults to infer_semantic_type
            eligibility: Value materialization predicate, defaults to
                         should_materialize_values
        """
        self.thresholds = thresholds or ClassificationThresholds()
        self.naming = naming or infer_semantic_type
        self.eligibility = eligibility or should_materialize_values

        # Order matters: later guards look at what earlier rules set
        self.rules: List[Rule] = [
            self.initial_guess,
            self.no_preview_display,
            self.url_semantic_type,
            self.json_semantic_type,
            self.email_semantic_type,
            self.category_type,
            self.primary_key,
            self.foreign_key,
        ]

    def classify(
        self,
        fingerprint: ColumnFingerprint,
        seed: Optional[ClassificationResult] = None,
    ) -> ClassificationResult:
        """
        Run every rule against one column.

        Args:
            fingerprint: Statistics for the column
            seed: Starting result; defaults to an empty result carrying
                  only the column id

        Returns:
            The final ClassificationResult
        """
        if seed is None:
            seed = ClassificationResult(column_id=fingerprint.id)
        return reduce(lambda result, rule: rule(fingerprint, result), self.rules, seed)

    # ======================================
    # Rules
    # ======================================
    def initial_guess(self, fingerprint: ColumnFingerprint, result: ClassificationResult) -> ClassificationResult:
        """Guess a semantic type from the column name and base type."""
        guessed = self.naming(fingerprint.name, fingerprint.base_type)
        if guessed is None:
            return result
        logger.debug("Column '%s' guessed as %s from its name.",
                     fingerprint.display_name, getattr(guessed, "value", guessed))
        return result.with_semantic_type(guessed)

    def no_preview_display(self, fingerprint: ColumnFingerprint, result: ClassificationResult) -> ClassificationResult:
        """If a visible textual column's values are long, keep it out of previews."""
        if not (fingerprint.visibility_type == Visibility.NORMAL.value
                and is_textual(fingerprint.base_type)):
            return result

        avg_length = fingerprint.avg_length
        if avg_length is None or avg_length <= self.thresholds.average_length_no_preview_threshold:
            return result

        logger.debug("Column '%s' has an average length of %s. Not displaying it in previews.",
                     fingerprint.display_name, avg_length)
        return result.with_preview_display(False)

    def url_semantic_type(self, fingerprint: ColumnFingerprint, result: ClassificationResult) -> ClassificationResult:
        """
        Mark an untyped textual column as URL when nearly all its values are URLs.

        percent_urls must be a float fraction in [0.0, 1.0]; a value on the
        0-100 scale is rejected rather than rescaled.
        """
        if result.semantic_type is not None or not is_textual(fingerprint.base_type):
            return result

        percent_urls = fingerprint.percent_urls
        if not (isinstance(percent_urls, float)
                and 0.0 <= percent_urls <= 1.0
                and percent_urls > self.thresholds.percent_valid_url_threshold):
            return result

        logger.debug("Column '%s' is %d%% URLs. Marking it as a URL.",
                     fingerprint.display_name, round(percent_urls * 100))
        return result.with_semantic_type(SemanticType.URL)

    def json_semantic_type(self, fingerprint: ColumnFingerprint, result: ClassificationResult) -> ClassificationResult:
        """Mark an untyped textual column as serialized JSON when every non-null value is JSON."""
        if result.semantic_type is not None or not is_textual(fingerprint.base_type):
            return result

        if fingerprint.percent_json != EXACT_MATCH_PERCENT:
            return result

        logger.debug("Column '%s' looks like it contains valid JSON objects. Setting semantic type to %s.",
                     fingerprint.display_name, SemanticType.SERIALIZED_JSON.value)
        return replace(result, semantic_type=SemanticType.SERIALIZED_JSON, preview_display=False)

    def email_semantic_type(self, fingerprint: ColumnFingerprint, result: ClassificationResult) -> ClassificationResult:
        """Mark an untyped textual column as Email when every non-null value is an email."""
        if result.semantic_type is not None or not is_textual(fingerprint.base_type):
            return result

        if fingerprint.percent_email != EXACT_MATCH_PERCENT:
            return result

        logger.debug("Column '%s' looks like it contains valid email addresses. Setting semantic type to %s.",
                     fingerprint.display_name, SemanticType.EMAIL.value)
        return replace(result, semantic_type=SemanticType.EMAIL, preview_display=True)

    def category_type(self, fingerprint: ColumnFingerprint, result: ClassificationResult) -> ClassificationResult:
        """
        Default an untyped, non-key, low-cardinality column to Category.

        The eligibility predicate gets the last word.
        """
        if fingerprint.is_pk or fingerprint.is_fk or result.semantic_type is not None:
            return result

        cardinality = fingerprint.cardinality
        if cardinality is None or not (0 < cardinality < self.thresholds.low_cardinality_threshold):
            return result

        if not self.eligibility(
            fingerprint.base_type,
            result.semantic_type,
            fingerprint.visibility_type,
            fingerprint.name,
        ):
            return result

        logger.debug("Column '%s' has %d distinct values. Marking it as a Category.",
                     fingerprint.display_name, cardinality)
        return result.with_semantic_type(SemanticType.CATEGORY)

    def primary_key(self, fingerprint: ColumnFingerprint, result: ClassificationResult) -> ClassificationResult:
        """A primary key column is always PK."""
        if not fingerprint.is_pk:
            return result
        return result.with_semantic_type(SemanticType.PK)

    def foreign_key(self, fingerprint: ColumnFingerprint, result: ClassificationResult) -> ClassificationResult:
        """A foreign key column is always FK, even when it is also flagged PK."""
        if not fingerprint.is_fk:
            return result
        return result.with_semantic_type(SemanticType.FK)
