"""
Gene Catalog for the Maturity Optimizer.

Static reference data describing the controllable cybersecurity outcomes
(genes), the categories and functions that group them, and the
implementation groups that decide which genes are active for an asset.
Everything here is built once at import time and exposed only through
read-only query functions.
"""

from typing import List, Dict, Tuple, Optional, Union
from dataclasses import dataclass
from enum import Enum, IntEnum


class ImplementationGroup(IntEnum):
    """Implementation tiers. A gene applies to its own tier and every higher one."""
    IG1 = 1
    IG2 = 2
    IG3 = 3


class Function(Enum):
    """Top-level groupings of outcomes."""
    IDENTIFY = "ID"
    PROTECT = "PR"
    DETECT = "DE"
    RESPOND = "RS"
    RECOVER = "RC"

    def applies_to(self, group: ImplementationGroup) -> bool:
        return any(gene.applies_to(group) for gene in _GENES_BY_FUNCTION[self])


class Category(Enum):
    """Second-level groupings of outcomes, each belonging to one function."""
    ID_AM = "ID.AM"
    ID_BE = "ID.BE"
    ID_GV = "ID.GV"
    ID_RA = "ID.RA"
    ID_RM = "ID.RM"
    ID_SC = "ID.SC"

    PR_AC = "PR.AC"
    PR_AT = "PR.AT"
    PR_DS = "PR.DS"
    PR_IP = "PR.IP"
    PR_MA = "PR.MA"
    PR_PT = "PR.PT"

    DE_AE = "DE.AE"
    DE_CM = "DE.CM"
    DE_DP = "DE.DP"

    RS_AN = "RS.AN"
    RS_CO = "RS.CO"
    RS_IM = "RS.IM"
    RS_MI = "RS.MI"
    RS_RP = "RS.RP"

    RC_CO = "RC.CO"
    RC_IM = "RC.IM"
    RC_RP = "RC.RP"

    @property
    def function(self) -> Function:
        return Function(self.value.split(".")[0])

    def applies_to(self, group: ImplementationGroup) -> bool:
        return any(gene.applies_to(group) for gene in _GENES_BY_CATEGORY[self])


@dataclass(frozen=True)
class Gene:
    """A single controllable outcome."""
    name: str
    implementation_group: ImplementationGroup
    category: Category

    @property
    def function(self) -> Function:
        return self.category.function

    def applies_to(self, group: ImplementationGroup) -> bool:
        """Whether this gene is active for assets of ``group``."""
        return self.implementation_group <= group

    def __repr__(self) -> str:
        return f"Gene({self.name})"


# (name, lowest implementation group, category)
_GENE_TABLE: Tuple[Tuple[str, ImplementationGroup, Category], ...] = (
    ("ID_AM_CSC_1_1", ImplementationGroup.IG1, Category.ID_AM),
    ("ID_AM_CSC_12_4", ImplementationGroup.IG2, Category.ID_AM),
    ("ID_AM_CSC_14_1", ImplementationGroup.IG1, Category.ID_AM),
    ("ID_AM_CSC_2_2", ImplementationGroup.IG1, Category.ID_AM),
    ("ID_AM_CSC_3_1", ImplementationGroup.IG1, Category.ID_AM),
    ("ID_AM_CSC_3_2", ImplementationGroup.IG1, Category.ID_AM),
    ("ID_AM_CSC_3_6", ImplementationGroup.IG1, Category.ID_AM),
    ("ID_AM_CSC_3_7", ImplementationGroup.IG2, Category.ID_AM),
    ("ID_AM_ID_AM_1", ImplementationGroup.IG1, Category.ID_AM),
    ("ID_AM_ID_AM_2", ImplementationGroup.IG1, Category.ID_AM),
    ("ID_AM_ID_AM_3", ImplementationGroup.IG2, Category.ID_AM),

    ("ID_BE_9D_1", ImplementationGroup.IG2, Category.ID_BE),
    ("ID_BE_ID_BE_1", ImplementationGroup.IG3, Category.ID_BE),
    ("ID_BE_ID_BE_2", ImplementationGroup.IG3, Category.ID_BE),
    ("ID_BE_ID_BE_3", ImplementationGroup.IG3, Category.ID_BE),
    ("ID_BE_ID_BE_4", ImplementationGroup.IG3, Category.ID_BE),
    ("ID_BE_ID_BE_5", ImplementationGroup.IG3, Category.ID_BE),

    ("ID_GV_CSC_17_4", ImplementationGroup.IG2, Category.ID_GV),
    ("ID_GV_ID_GV_1", ImplementationGroup.IG1, Category.ID_GV),
    ("ID_GV_ID_GV_2", ImplementationGroup.IG2, Category.ID_GV),
    ("ID_GV_ID_GV_3", ImplementationGroup.IG3, Category.ID_GV),
    ("ID_GV_ID_GV_4", ImplementationGroup.IG3, Category.ID_GV),

    ("ID_RA_9D_1", ImplementationGroup.IG2, Category.ID_RA),
    ("ID_RA_CSC_18_2", ImplementationGroup.IG2, Category.ID_RA),
    ("ID_RA_CSC_18_5", ImplementationGroup.IG3, Category.ID_RA),
    ("ID_RA_CSC_3_7", ImplementationGroup.IG2, Category.ID_RA),
    ("ID_RA_ID_RA_1", ImplementationGroup.IG1, Category.ID_RA),
    ("ID_RA_ID_RA_2", ImplementationGroup.IG3, Category.ID_RA),
    ("ID_RA_ID_RA_3", ImplementationGroup.IG3, Category.ID_RA),
    ("ID_RA_ID_RA_4", ImplementationGroup.IG3, Category.ID_RA),
    ("ID_RA_ID_RA_6", ImplementationGroup.IG3, Category.ID_RA),

    ("ID_RM_9D_8", ImplementationGroup.IG2, Category.ID_RM),
    ("ID_RM_ID_RM_1", ImplementationGroup.IG3, Category.ID_RM),
    ("ID_RM_ID_RM_2", ImplementationGroup.IG3, Category.ID_RM),
    ("ID_RM_ID_RM_3", ImplementationGroup.IG3, Category.ID_RM),

    ("ID_SC_ID_SC_1", ImplementationGroup.IG2, Category.ID_SC),
    ("ID_SC_ID_SC_2", ImplementationGroup.IG1, Category.ID_SC),
    ("ID_SC_ID_SC_3", ImplementationGroup.IG2, Category.ID_SC),
    ("ID_SC_ID_SC_4", ImplementationGroup.IG3, Category.ID_SC),
    ("ID_SC_ID_SC_5", ImplementationGroup.IG1, Category.ID_SC),

    ("PR_AC_CSC_12_5", ImplementationGroup.IG2, Category.PR_AC),
    ("PR_AC_CSC_12_6", ImplementationGroup.IG2, Category.PR_AC),
    ("PR_AC_CSC_13_4", ImplementationGroup.IG2, Category.PR_AC),
    ("PR_AC_CSC_4_7", ImplementationGroup.IG1, Category.PR_AC),
    ("PR_AC_CSC_5_2", ImplementationGroup.IG1, Category.PR_AC),
    ("PR_AC_CSC_5_6", ImplementationGroup.IG2, Category.PR_AC),
    ("PR_AC_CSC_6_8", ImplementationGroup.IG3, Category.PR_AC),
    ("PR_AC_PR_AC_1", ImplementationGroup.IG1, Category.PR_AC),
    ("PR_AC_PR_AC_2", ImplementationGroup.IG3, Category.PR_AC),
    ("PR_AC_PR_AC_3", ImplementationGroup.IG1, Category.PR_AC),
    ("PR_AC_PR_AC_4", ImplementationGroup.IG1, Category.PR_AC),
    ("PR_AC_PR_AC_5", ImplementationGroup.IG1, Category.PR_AC),
    ("PR_AC_PR_AC_6", ImplementationGroup.IG3, Category.PR_AC),
    ("PR_AC_PR_AC_7", ImplementationGroup.IG1, Category.PR_AC),

    ("PR_AT_CSC_14_9", ImplementationGroup.IG2, Category.PR_AT),
    ("PR_AT_CSC_15_4", ImplementationGroup.IG2, Category.PR_AT),
    ("PR_AT_PR_AT_1", ImplementationGroup.IG1, Category.PR_AT),
    ("PR_AT_PR_AT_2", ImplementationGroup.IG2, Category.PR_AT),

    ("PR_DS_9D_6", ImplementationGroup.IG3, Category.PR_DS),
    ("PR_DS_CSC_3_4", ImplementationGroup.IG1, Category.PR_DS),
    ("PR_DS_PR_DS_1", ImplementationGroup.IG2, Category.PR_DS),
    ("PR_DS_PR_DS_2", ImplementationGroup.IG2, Category.PR_DS),
    ("PR_DS_PR_DS_3", ImplementationGroup.IG1, Category.PR_DS),
    ("PR_DS_PR_DS_4", ImplementationGroup.IG3, Category.PR_DS),
    ("PR_DS_PR_DS_5", ImplementationGroup.IG3, Category.PR_DS),
    ("PR_DS_PR_DS_6", ImplementationGroup.IG2, Category.PR_DS),
    ("PR_DS_PR_DS_7", ImplementationGroup.IG2, Category.PR_DS),
    ("PR_DS_PR_DS_8", ImplementationGroup.IG3, Category.PR_DS),

    ("PR_IP_9D_3", ImplementationGroup.IG2, Category.PR_IP),
    ("PR_IP_9D_5", ImplementationGroup.IG2, Category.PR_IP),
    ("PR_IP_9D_8", ImplementationGroup.IG2, Category.PR_IP),
    ("PR_IP_9D_9", ImplementationGroup.IG1, Category.PR_IP),
    ("PR_IP_CSC_11_1", ImplementationGroup.IG1, Category.PR_IP),
    ("PR_IP_CSC_16_1", ImplementationGroup.IG2, Category.PR_IP),
    ("PR_IP_CSC_16_14", ImplementationGroup.IG3, Category.PR_IP),
    ("PR_IP_CSC_18_4", ImplementationGroup.IG3, Category.PR_IP),
    ("PR_IP_CSC_2_5", ImplementationGroup.IG2, Category.PR_IP),
    ("PR_IP_CSC_2_6", ImplementationGroup.IG2, Category.PR_IP),
    ("PR_IP_CSC_2_7", ImplementationGroup.IG3, Category.PR_IP),
    ("PR_IP_CSC_4_3", ImplementationGroup.IG1, Category.PR_IP),
    ("PR_IP_PR_IP_1", ImplementationGroup.IG1, Category.PR_IP),
    ("PR_IP_PR_IP_10", ImplementationGroup.IG2, Category.PR_IP),
    ("PR_IP_PR_IP_11", ImplementationGroup.IG1, Category.PR_IP),
    ("PR_IP_PR_IP_12", ImplementationGroup.IG2, Category.PR_IP),
    ("PR_IP_PR_IP_2", ImplementationGroup.IG2, Category.PR_IP),
    ("PR_IP_PR_IP_3", ImplementationGroup.IG3, Category.PR_IP),
    ("PR_IP_PR_IP_4", ImplementationGroup.IG1, Category.PR_IP),
    ("PR_IP_PR_IP_5", ImplementationGroup.IG3, Category.PR_IP),
    ("PR_IP_PR_IP_6", ImplementationGroup.IG1, Category.PR_IP),
    ("PR_IP_PR_IP_7", ImplementationGroup.IG2, Category.PR_IP),
    ("PR_IP_PR_IP_8", ImplementationGroup.IG3, Category.PR_IP),
    ("PR_IP_PR_IP_9", ImplementationGroup.IG1, Category.PR_IP),

    ("PR_MA_9D_5", ImplementationGroup.IG2, Category.PR_MA),
    ("PR_MA_9D_9", ImplementationGroup.IG2, Category.PR_MA),
    ("PR_MA_CSC_12_1", ImplementationGroup.IG1, Category.PR_MA),
    ("PR_MA_CSC_12_3", ImplementationGroup.IG2, Category.PR_MA),
    ("PR_MA_CSC_13_5", ImplementationGroup.IG2, Category.PR_MA),
    ("PR_MA_CSC_16_13", ImplementationGroup.IG3, Category.PR_MA),
    ("PR_MA_CSC_18_3", ImplementationGroup.IG2, Category.PR_MA),
    ("PR_MA_CSC_4_2", ImplementationGroup.IG1, Category.PR_MA),
    ("PR_MA_CSC_4_6", ImplementationGroup.IG1, Category.PR_MA),
    ("PR_MA_CSC_4_8", ImplementationGroup.IG2, Category.PR_MA),
    ("PR_MA_CSC_4_9", ImplementationGroup.IG2, Category.PR_MA),
    ("PR_MA_CSC_7_3", ImplementationGroup.IG1, Category.PR_MA),
    ("PR_MA_CSC_8_1", ImplementationGroup.IG1, Category.PR_MA),
    ("PR_MA_CSC_8_10", ImplementationGroup.IG2, Category.PR_MA),
    ("PR_MA_CSC_8_3", ImplementationGroup.IG1, Category.PR_MA),
    ("PR_MA_CSC_8_9", ImplementationGroup.IG2, Category.PR_MA),
    ("PR_MA_PR_MA_1", ImplementationGroup.IG3, Category.PR_MA),

    ("PR_PT_9D_4", ImplementationGroup.IG2, Category.PR_PT),
    ("PR_PT_9D_7", ImplementationGroup.IG3, Category.PR_PT),
    ("PR_PT_CSC_4_12", ImplementationGroup.IG3, Category.PR_PT),
    ("PR_PT_CSC_4_4", ImplementationGroup.IG1, Category.PR_PT),
    ("PR_PT_CSC_4_5", ImplementationGroup.IG1, Category.PR_PT),
    ("PR_PT_CSC_9_5", ImplementationGroup.IG2, Category.PR_PT),
    ("PR_PT_PR_PT_1", ImplementationGroup.IG1, Category.PR_PT),
    ("PR_PT_PR_PT_2", ImplementationGroup.IG1, Category.PR_PT),
    ("PR_PT_PR_PT_3", ImplementationGroup.IG3, Category.PR_PT),
    ("PR_PT_PR_PT_4", ImplementationGroup.IG3, Category.PR_PT),
    ("PR_PT_PR_PT_5", ImplementationGroup.IG1, Category.PR_PT),

    ("DE_AE_CSC_8_12", ImplementationGroup.IG3, Category.DE_AE),
    ("DE_AE_DE_AE_1", ImplementationGroup.IG2, Category.DE_AE),
    ("DE_AE_DE_AE_2", ImplementationGroup.IG2, Category.DE_AE),
    ("DE_AE_DE_AE_3", ImplementationGroup.IG1, Category.DE_AE),
    ("DE_AE_DE_AE_4", ImplementationGroup.IG3, Category.DE_AE),
    ("DE_AE_DE_AE_5", ImplementationGroup.IG3, Category.DE_AE),

    ("DE_CM_CSC_13_1", ImplementationGroup.IG2, Category.DE_CM),
    ("DE_CM_CSC_13_5", ImplementationGroup.IG2, Category.DE_CM),
    ("DE_CM_CSC_3_14", ImplementationGroup.IG3, Category.DE_CM),
    ("DE_CM_DE_CM_1", ImplementationGroup.IG2, Category.DE_CM),
    ("DE_CM_DE_CM_2", ImplementationGroup.IG3, Category.DE_CM),
    ("DE_CM_DE_CM_3", ImplementationGroup.IG3, Category.DE_CM),
    ("DE_CM_DE_CM_4", ImplementationGroup.IG1, Category.DE_CM),
    ("DE_CM_DE_CM_5", ImplementationGroup.IG3, Category.DE_CM),
    ("DE_CM_DE_CM_6", ImplementationGroup.IG3, Category.DE_CM),
    ("DE_CM_DE_CM_7", ImplementationGroup.IG1, Category.DE_CM),
    ("DE_CM_DE_CM_8", ImplementationGroup.IG2, Category.DE_CM),

    ("DE_DP_CSC_17_1", ImplementationGroup.IG1, Category.DE_DP),
    ("DE_DP_CSC_17_4", ImplementationGroup.IG2, Category.DE_DP),
    ("DE_DP_CSC_17_5", ImplementationGroup.IG2, Category.DE_DP),
    ("DE_DP_DE_DP_2", ImplementationGroup.IG3, Category.DE_DP),
    ("DE_DP_DE_DP_3", ImplementationGroup.IG3, Category.DE_DP),
    ("DE_DP_DE_DP_5", ImplementationGroup.IG3, Category.DE_DP),

    ("RS_AN_CSC_17_9", ImplementationGroup.IG3, Category.RS_AN),
    ("RS_AN_RS_AN_1", ImplementationGroup.IG2, Category.RS_AN),
    ("RS_AN_RS_AN_2", ImplementationGroup.IG3, Category.RS_AN),
    ("RS_AN_RS_AN_3", ImplementationGroup.IG3, Category.RS_AN),
    ("RS_AN_RS_AN_5", ImplementationGroup.IG2, Category.RS_AN),

    ("RS_CO_CSC_17_4", ImplementationGroup.IG1, Category.RS_CO),
    ("RS_CO_CSC_17_5", ImplementationGroup.IG2, Category.RS_CO),
    ("RS_CO_RS_CO_5", ImplementationGroup.IG3, Category.RS_CO),

    ("RS_IM_RS_IM_1", ImplementationGroup.IG2, Category.RS_IM),
    ("RS_IM_RS_IM_2", ImplementationGroup.IG2, Category.RS_IM),

    ("RS_MI_CSC_1_2", ImplementationGroup.IG1, Category.RS_MI),
    ("RS_MI_CSC_4_10", ImplementationGroup.IG2, Category.RS_MI),
    ("RS_MI_CSC_7_7", ImplementationGroup.IG2, Category.RS_MI),
    ("RS_MI_RS_MI_1", ImplementationGroup.IG3, Category.RS_MI),
    ("RS_MI_RS_MI_2", ImplementationGroup.IG3, Category.RS_MI),
    ("RS_MI_RS_MI_3", ImplementationGroup.IG3, Category.RS_MI),

    ("RS_RP_CSC_17_6", ImplementationGroup.IG2, Category.RS_RP),
    ("RS_RP_RS_RP_1", ImplementationGroup.IG3, Category.RS_RP),

    ("RC_CO_RC_CO_1", ImplementationGroup.IG3, Category.RC_CO),
    ("RC_CO_RC_CO_2", ImplementationGroup.IG3, Category.RC_CO),
    ("RC_CO_RC_CO_3", ImplementationGroup.IG3, Category.RC_CO),

    ("RC_IM_RC_IM_1", ImplementationGroup.IG3, Category.RC_IM),
    ("RC_IM_RC_IM_2", ImplementationGroup.IG3, Category.RC_IM),

    ("RC_RP_RC_RP_1", ImplementationGroup.IG3, Category.RC_RP),
)

_GENES: Tuple[Gene, ...] = tuple(Gene(name, group, category) for name, group, category in _GENE_TABLE)
_GENES_BY_NAME: Dict[str, Gene] = {gene.name: gene for gene in _GENES}
_GENES_BY_CATEGORY: Dict[Category, Tuple[Gene, ...]] = {
    category: tuple(g for g in _GENES if g.category is category) for category in Category
}
_GENES_BY_FUNCTION: Dict[Function, Tuple[Gene, ...]] = {
    function: tuple(g for g in _GENES if g.function is function) for function in Function
}

GeneKey = Union[Gene, Category, Function]


def all_genes() -> List[Gene]:
    """Every gene of the catalog, in catalog order."""
    return list(_GENES)


def get_gene(name: str) -> Gene:
    """Look up a gene by name. Raises KeyError for unknown names."""
    try:
        return _GENES_BY_NAME[name]
    except KeyError:
        raise KeyError(f"Unknown gene: {name}") from None


def get_category(name: str) -> Category:
    """Look up a category by member name ("PR_AC") or code ("PR.AC")."""
    for category in Category:
        if name in (category.name, category.value):
            return category
    raise KeyError(f"Unknown category: {name}")


def get_function(name: str) -> Function:
    """Look up a function by member name ("PROTECT") or code ("PR")."""
    for function in Function:
        if name in (function.name, function.value):
            return function
    raise KeyError(f"Unknown function: {name}")


def genes_for(group: ImplementationGroup) -> List[Gene]:
    """Genes active for an implementation group, in catalog order."""
    return [gene for gene in _GENES if gene.applies_to(group)]


def genes_for_category(category: Category, group: Optional[ImplementationGroup] = None) -> List[Gene]:
    """Genes of a category, optionally filtered by implementation group."""
    genes = _GENES_BY_CATEGORY[category]
    if group is None:
        return list(genes)
    return [gene for gene in genes if gene.applies_to(group)]


def genes_for_function(function: Function, group: Optional[ImplementationGroup] = None) -> List[Gene]:
    """Genes under a function, optionally filtered by implementation group."""
    genes = _GENES_BY_FUNCTION[function]
    if group is None:
        return list(genes)
    return [gene for gene in genes if gene.applies_to(group)]


def categories_for(group: ImplementationGroup, function: Optional[Function] = None) -> List[Category]:
    """Categories active for a group, optionally restricted to one function."""
    return [
        category for category in Category
        if category.applies_to(group) and (function is None or category.function is function)
    ]


def functions_for(group: ImplementationGroup) -> List[Function]:
    """Functions active for a group."""
    return [function for function in Function if function.applies_to(group)]


def applies_to(key: Optional[GeneKey], group: ImplementationGroup) -> bool:
    """Whether a goal key (gene, category, function or None for the asset) applies to a group."""
    if key is None:
        return True
    return key.applies_to(group)
