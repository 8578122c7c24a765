"""
Unit tests for the gene catalog (Subtask 1.2).

Tests cover:
- Catalog size per implementation group
- Category and function membership
- Applicability of genes, categories and functions to groups
- Name lookups
"""

import pytest

from src.optimizer.core.catalog import (
    ImplementationGroup,
    Function,
    Category,
    Gene,
    all_genes,
    get_gene,
    get_category,
    get_function,
    genes_for,
    genes_for_category,
    genes_for_function,
    categories_for,
    functions_for,
    applies_to,
)


class TestCatalogSize:
    """Test suite for catalog dimensions."""

    @pytest.mark.parametrize("group,count", [
        (ImplementationGroup.IG1, 47),
        (ImplementationGroup.IG2, 107),
        (ImplementationGroup.IG3, 167),
    ])
    def test_active_gene_counts(self, group, count):
        assert len(genes_for(group)) == count

    def test_all_genes(self):
        genes = all_genes()
        assert len(genes) == 167
        assert len({gene.name for gene in genes}) == 167

    def test_five_functions_and_twenty_three_categories(self):
        assert len(list(Function)) == 5
        assert len(list(Category)) == 23

    def test_groups_are_nested(self):
        """A gene active for a group is active for every higher group."""
        ig1 = set(genes_for(ImplementationGroup.IG1))
        ig2 = set(genes_for(ImplementationGroup.IG2))
        ig3 = set(genes_for(ImplementationGroup.IG3))
        assert ig1 < ig2 < ig3


class TestMembership:
    """Test suite for gene, category and function relationships."""

    def test_gene_parents(self):
        gene = get_gene("PR_AC_CSC_4_7")
        assert gene.category is Category.PR_AC
        assert gene.function is Function.PROTECT
        assert gene.implementation_group is ImplementationGroup.IG1

    def test_category_function(self):
        assert Category.DE_CM.function is Function.DETECT
        assert Category.RC_RP.function is Function.RECOVER

    def test_genes_for_category_filters_by_group(self):
        all_pr_ac = genes_for_category(Category.PR_AC)
        ig1_pr_ac = genes_for_category(Category.PR_AC, ImplementationGroup.IG1)
        assert len(all_pr_ac) == 14
        assert len(ig1_pr_ac) == 7
        assert all(gene.category is Category.PR_AC for gene in all_pr_ac)

    def test_genes_for_function(self):
        genes = genes_for_function(Function.RECOVER)
        assert len(genes) == 6
        assert genes_for_function(Function.RECOVER, ImplementationGroup.IG2) == []

    def test_every_gene_belongs_to_its_function(self):
        for function in Function:
            for gene in genes_for_function(function):
                assert gene.category.function is function


class TestApplicability:
    """Test suite for scope applicability."""

    def test_gene_applies_to_own_and_higher_groups(self):
        gene = get_gene("ID_RM_9D_8")
        assert not gene.applies_to(ImplementationGroup.IG1)
        assert gene.applies_to(ImplementationGroup.IG2)
        assert gene.applies_to(ImplementationGroup.IG3)

    def test_category_applicability(self):
        assert not Category.ID_BE.applies_to(ImplementationGroup.IG1)
        assert Category.ID_BE.applies_to(ImplementationGroup.IG2)
        assert not Category.RC_CO.applies_to(ImplementationGroup.IG2)

    def test_function_applicability(self):
        assert functions_for(ImplementationGroup.IG1) == [
            Function.IDENTIFY, Function.PROTECT, Function.DETECT, Function.RESPOND
        ]
        assert len(functions_for(ImplementationGroup.IG3)) == 5

    @pytest.mark.parametrize("group,count", [
        (ImplementationGroup.IG1, 15),
        (ImplementationGroup.IG2, 20),
        (ImplementationGroup.IG3, 23),
    ])
    def test_categories_per_group(self, group, count):
        assert len(categories_for(group)) == count

    def test_categories_for_function(self):
        categories = categories_for(ImplementationGroup.IG3, Function.RECOVER)
        assert categories == [Category.RC_CO, Category.RC_IM, Category.RC_RP]

    def test_asset_key_always_applies(self):
        assert applies_to(None, ImplementationGroup.IG1)
        assert applies_to(Function.PROTECT, ImplementationGroup.IG1)
        assert not applies_to(Function.RECOVER, ImplementationGroup.IG1)


class TestLookups:
    """Test suite for name lookups."""

    def test_unknown_gene(self):
        with pytest.raises(KeyError):
            get_gene("NOT_A_GENE")

    def test_category_by_name_or_code(self):
        assert get_category("PR.AC") is Category.PR_AC
        assert get_category("PR_AC") is Category.PR_AC
        with pytest.raises(KeyError):
            get_category("XX.YY")

    def test_function_by_name_or_code(self):
        assert get_function("PR") is Function.PROTECT
        assert get_function("PROTECT") is Function.PROTECT
        with pytest.raises(KeyError):
            get_function("GOVERN")

    def test_genes_are_immutable(self):
        gene = get_gene("PR_AC_CSC_4_7")
        with pytest.raises(AttributeError):
            gene.name = "OTHER"
        assert isinstance(gene, Gene)
