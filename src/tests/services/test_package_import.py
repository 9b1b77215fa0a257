"""
Tests for migration package import.

Tests cover:
- Upsert of masters and headers (insert, update, blank cells, required fields)
- Skip and error rules for blank keys and unresolvable references
- Fingerprint dedup of lines, links and events
- Deferred references (self references and forward references)
- Stage hooks, header tolerance, missing files and result counters
"""

from datetime import date
from decimal import Decimal

import pytest

from src.models import (
    Account,
    Agent,
    Article,
    ArticlePrice,
    Contract,
    Document,
    DocumentLine,
    DocumentLink,
    OrderLine,
    ServiceTicket,
    StockMovement,
    Supplier,
    Warehouse,
)
from src.services.exceptions import PackageNotFoundError
from src.services.migration_package_service import import_package
from src.services.package_exchange.csv_codec import write_csv_file
from src.utils.datetime_utils import local_today


MOVEMENT_HEADER = [
    "TipoMovimento",
    "DataMovimento",
    "ArticoloCodice",
    "MagazzinoCodice",
    "Quantita",
    "CostoUnitario",
    "NumeroDocumento",
    "DocumentoKey",
    "DocumentoRigaNumero",
    "NumeroSerie",
    "Lotto",
]

DOCUMENT_HEADER = ["TipoDocumento", "NumeroDocumento", "DataDocumento", "ClienteCodice", "DocumentoOriginaleKey"]


def write_file(package_dir, file_name, header, *rows):
    """Write one package file with the given header and rows."""
    write_csv_file(package_dir / file_name, header, rows)


def counts_for(result, entity_type):
    return result.entity_counts[entity_type]


# ============================================================================
# Upsert
# ============================================================================


class TestUpsert:
    """Tests for masters and headers."""

    def test_insert_master(self, test_db, package_dir):
        write_file(
            package_dir,
            "01_agenti.csv",
            ["Codice", "Nome", "Cognome", "PercentualeProvvigione", "Attivo"],
            ["AG01", "Mario", "Rossi", "5,5", "S"],
        )

        result = import_package(package_dir)

        assert result.files_read == 1
        assert result.inserted == 1
        agent = test_db().query(Agent).filter_by(code="AG01").one()
        assert agent.first_name == "Mario"
        assert agent.commission_percent == Decimal("5.5")
        assert agent.is_active is True

    def test_update_overwrites_only_non_blank_cells(self, test_db, sample_masters, package_dir):
        write_file(
            package_dir,
            "04_fornitori.csv",
            ["Codice", "RagioneSociale", "Citta", "Telefono"],
            ["f001", "", "", "011 555"],
        )

        result = import_package(package_dir)

        assert counts_for(result, "Supplier") == {"inserted": 0, "updated": 1, "skipped": 0, "errors": 0}
        supplier = test_db().query(Supplier).filter_by(code="F001").one()
        assert supplier.company_name == "Forniture Srl"
        assert supplier.city == "Milano"
        assert supplier.phone == "011 555"

    def test_blank_code_skipped(self, test_db, package_dir):
        write_file(
            package_dir,
            "04_fornitori.csv",
            ["Codice", "RagioneSociale"],
            ["   ", "Senza codice"],
            ["F2", "Con codice"],
        )

        result = import_package(package_dir)

        assert result.skipped == 1
        assert result.inserted == 1
        assert test_db().query(Supplier).count() == 1

    def test_missing_required_field_is_error(self, test_db, package_dir):
        write_file(
            package_dir,
            "05_articoli.csv",
            ["Codice", "Descrizione"],
            ["ART9", ""],
            ["ART10", "Dado M4"],
        )

        result = import_package(package_dir)

        assert result.errors == 1
        assert result.inserted == 1
        assert test_db().query(Article).filter_by(code="ART9").first() is None

    def test_unresolvable_optional_reference_left_unset(self, test_db, package_dir):
        write_file(
            package_dir,
            "05_articoli.csv",
            ["Codice", "Descrizione", "FornitorePredefinitoCodice"],
            ["ART1", "Vite", "NOPE"],
        )

        result = import_package(package_dir)

        assert result.inserted == 1
        assert result.errors == 0
        article = test_db().query(Article).filter_by(code="ART1").one()
        assert article.default_supplier_id is None

    def test_unresolvable_optional_reference_keeps_value_on_update(
        self, test_db, sample_masters, package_dir
    ):
        write_file(
            package_dir,
            "05_articoli.csv",
            ["Codice", "Descrizione", "FornitorePredefinitoCodice"],
            ["ART01", "Vite 4x25", "NOPE"],
        )

        result = import_package(package_dir)

        assert result.updated == 1
        article = test_db().query(Article).filter_by(code="ART01").one()
        assert article.description == "Vite 4x25"
        assert article.default_supplier_id == sample_masters.supplier.id

    def test_mandatory_reference_rules(self, test_db, sample_masters, package_dir):
        write_file(
            package_dir,
            "10_contratti.csv",
            ["NumeroContratto", "ClienteCodice", "Importo"],
            ["CT1", "C001", "1200"],
            ["CT2", "C999", "100"],
            ["CT3", "", "100"],
        )

        result = import_package(package_dir)

        assert counts_for(result, "Contract") == {"inserted": 1, "updated": 0, "skipped": 1, "errors": 1}
        contract = test_db().query(Contract).filter_by(number="CT1").one()
        assert contract.client_id == sample_masters.client.id
        assert contract.amount == Decimal("1200")

    def test_unreadable_cell_is_error(self, test_db, package_dir):
        write_file(
            package_dir,
            "05_articoli.csv",
            ["Codice", "Descrizione", "PrezzoVendita", "GestioneLotti"],
            ["ART1", "Vite", "dieci", "1"],
            ["ART2", "Dado", "1.234,50", "si"],
        )

        result = import_package(package_dir)

        assert result.errors == 1
        article = test_db().query(Article).filter_by(code="ART2").one()
        assert article.sale_price == Decimal("1234.50")
        assert article.tracks_lots is True

    def test_out_of_range_integer_is_error(self, test_db, package_dir):
        write_file(
            package_dir,
            "04_fornitori.csv",
            ["Codice", "RagioneSociale", "GiorniPagamento"],
            ["F1", "Uno", "99999999999999999999"],
            ["F2", "Due", "30"],
        )
        write_file(package_dir, "05_articoli.csv", ["Codice", "Descrizione"], ["ART1", "Vite"])

        result = import_package(package_dir)

        assert counts_for(result, "Supplier") == {"inserted": 1, "updated": 0, "skipped": 0, "errors": 1}
        assert counts_for(result, "Article")["inserted"] == 1
        session = test_db()
        assert [s.code for s in session.query(Supplier)] == ["F2"]
        assert session.query(Supplier).one().payment_days == 30

    def test_duplicate_key_in_file_last_non_blank_wins(self, test_db, package_dir):
        write_file(
            package_dir,
            "04_fornitori.csv",
            ["Codice", "RagioneSociale", "Citta", "Telefono"],
            ["F1", "Prima", "Roma", "06 1"],
            ["f1", "Seconda", "", ""],
        )

        result = import_package(package_dir)

        assert result.inserted == 1
        assert result.updated == 1
        supplier = test_db().query(Supplier).one()
        assert supplier.code == "F1"
        assert supplier.company_name == "Seconda"
        assert supplier.city == "Roma"

    def test_tolerant_headers(self, test_db, package_dir):
        write_file(
            package_dir,
            "03_magazzini.csv",
            [" codice ", "DESCRIZIONE", "Città", "principale"],
            ["MAG1", "Deposito", "Forlì", "0"],
        )

        import_package(package_dir)

        warehouse = test_db().query(Warehouse).one()
        assert warehouse.description == "Deposito"
        assert warehouse.city == "Forlì"

    def test_composite_header_key(self, test_db, sample_masters, package_dir):
        write_file(
            package_dir,
            "30_documenti.csv",
            DOCUMENT_HEADER + ["Totale"],
            ["FATTURA", "1", "2024-01-10", "C001", "", "100"],
            ["DDT", "1", "10/01/2024", "C001", "", "0"],
            ["fattura", "1", "", "", "", "110"],
        )

        result = import_package(package_dir)

        assert counts_for(result, "Document")["inserted"] == 2
        assert counts_for(result, "Document")["updated"] == 1
        invoice = test_db().query(Document).filter_by(document_type="FATTURA").one()
        assert invoice.total == Decimal("110")
        assert invoice.document_date == date(2024, 1, 10)


# ============================================================================
# Fingerprint dedup
# ============================================================================


class TestFingerprintDedup:
    """Tests for lines, links and events."""

    def _movement(self, quantity="5"):
        return ["CARICO", "2024-01-10", "ART01", "MAG01", quantity, "0,15", "", "", "", "", ""]

    def test_movement_reimport_skipped(self, test_db, sample_masters, package_dir):
        write_file(package_dir, "33_movimenti_magazzino.csv", MOVEMENT_HEADER, self._movement())

        first = import_package(package_dir)
        second = import_package(package_dir)

        assert counts_for(first, "StockMovement")["inserted"] == 1
        assert counts_for(second, "StockMovement")["skipped"] == 1
        assert test_db().query(StockMovement).count() == 1

    def test_changed_quantity_inserted(self, test_db, sample_masters, package_dir):
        write_file(package_dir, "33_movimenti_magazzino.csv", MOVEMENT_HEADER, self._movement("5"))
        import_package(package_dir)

        write_file(package_dir, "33_movimenti_magazzino.csv", MOVEMENT_HEADER, self._movement("6"))
        result = import_package(package_dir)

        assert result.inserted == 1
        assert test_db().query(StockMovement).count() == 2

    def test_equivalent_notation_is_duplicate(self, test_db, sample_masters, package_dir):
        write_file(
            package_dir,
            "33_movimenti_magazzino.csv",
            MOVEMENT_HEADER,
            self._movement("5"),
            ["carico", "10/01/2024", "art01", "mag01", "5,000", "0.1500", "", "", "", "", ""],
        )

        result = import_package(package_dir)

        assert result.inserted == 1
        assert result.skipped == 1

    def test_movement_skip_and_error_rules(self, test_db, sample_masters, package_dir):
        write_file(
            package_dir,
            "33_movimenti_magazzino.csv",
            MOVEMENT_HEADER,
            ["", "2024-01-10", "ART01", "MAG01", "1", "", "", "", "", "", ""],
            ["CARICO", "2024-01-10", "", "MAG01", "1", "", "", "", "", "", ""],
            ["CARICO", "", "ART01", "MAG01", "1", "", "", "", "", "", ""],
            ["CARICO", "2024-01-10", "ART404", "MAG01", "1", "", "", "", "", "", ""],
            ["", "2024-01-10", "ART404", "MAG01", "1", "", "", "", "", "", ""],
        )

        result = import_package(package_dir)

        assert counts_for(result, "StockMovement") == {"inserted": 0, "updated": 0, "skipped": 3, "errors": 2}

    def test_movement_resolves_document_line(self, test_db, sample_masters, package_dir):
        write_file(package_dir, "30_documenti.csv", DOCUMENT_HEADER, ["DDT", "7", "2024-02-01", "C001", ""])
        write_file(
            package_dir,
            "31_documenti_righe.csv",
            ["DocumentoKey", "NumeroRiga", "ArticoloCodice", "Descrizione", "Quantita"],
            ["DDT|7", "1", "ART01", "Vite", "10"],
            ["DDT|7", "2", "", "Trasporto", "1"],
        )
        row = ["SCARICO", "2024-02-01", "ART01", "MAG01", "10", "", "7", "ddt|7", "1", "", ""]
        write_file(package_dir, "33_movimenti_magazzino.csv", MOVEMENT_HEADER, row)

        import_package(package_dir)

        session = test_db()
        movement = session.query(StockMovement).one()
        line = session.query(DocumentLine).filter_by(line_number=1).one()
        assert movement.document_line_id == line.id
        assert movement.document_id == line.document_id

    def test_movement_full_line_key_without_document(self, test_db, sample_masters, package_dir):
        write_file(package_dir, "30_documenti.csv", DOCUMENT_HEADER, ["DDT", "7", "2024-02-01", "C001", ""])
        write_file(
            package_dir,
            "31_documenti_righe.csv",
            ["DocumentoKey", "NumeroRiga", "ArticoloCodice", "Descrizione", "Quantita"],
            ["DDT|7", "1", "ART01", "Vite", "10"],
        )
        row = ["SCARICO", "2024-02-01", "ART01", "MAG01", "10", "", "", "", "DDT|7|1", "", ""]
        write_file(package_dir, "33_movimenti_magazzino.csv", MOVEMENT_HEADER, row)

        import_package(package_dir)

        session = test_db()
        movement = session.query(StockMovement).one()
        assert movement.document_id is None
        assert movement.document_line_id == session.query(DocumentLine).one().id

    def test_lines_of_unknown_header_skipped(self, test_db, package_dir):
        write_file(
            package_dir,
            "21_ordini_righe.csv",
            ["OrdineKey", "NumeroRiga", "Descrizione"],
            ["CLIENTE|404", "1", "Orfana"],
            ["", "2", "Senza ordine"],
        )

        result = import_package(package_dir)

        assert result.skipped == 2
        assert test_db().query(OrderLine).count() == 0

    def test_order_lines_dedup(self, test_db, sample_masters, package_dir):
        write_file(
            package_dir,
            "20_ordini.csv",
            ["TipoOrdine", "NumeroOrdine", "DataOrdine", "ClienteCodice"],
            ["CLIENTE", "1", "2024-03-01", "C001"],
        )
        write_file(
            package_dir,
            "21_ordini_righe.csv",
            ["OrdineKey", "NumeroRiga", "ArticoloCodice", "Descrizione", "QuantitaOrdinata", "PrezzoUnitario"],
            ["CLIENTE|1", "1", "ART01", "Vite", "100", "0.15"],
            ["CLIENTE|1", "1", "ART01", "Vite", "100", "0,15"],
            ["CLIENTE|1", "2", "ART01", "Vite", "100", "0.15"],
        )

        result = import_package(package_dir)

        assert counts_for(result, "OrderLine") == {"inserted": 2, "updated": 0, "skipped": 1, "errors": 0}

    def test_article_price_defaults_valid_from_to_today(self, test_db, sample_masters, package_dir):
        write_file(
            package_dir,
            "07_articoli_listino.csv",
            ["ListinoCodice", "ArticoloCodice", "Prezzo", "DataInizioValidita"],
            ["L01", "ART01", "0,12", ""],
            ["L01", "ART01", "0,11", ""],
        )

        result = import_package(package_dir)

        assert result.inserted == 1
        assert result.skipped == 1
        price = test_db().query(ArticlePrice).one()
        assert price.valid_from == local_today()
        assert price.price == Decimal("0.12")

    def test_document_link_requires_both_documents(self, test_db, sample_masters, package_dir):
        write_file(
            package_dir,
            "30_documenti.csv",
            DOCUMENT_HEADER,
            ["DDT", "1", "2024-01-05", "C001", ""],
            ["FATTURA", "1", "2024-01-31", "C001", ""],
        )
        write_file(
            package_dir,
            "32_documenti_collegamenti.csv",
            ["DocumentoKey", "DocumentoOrigineKey"],
            ["FATTURA|1", "DDT|1"],
            ["FATTURA|1", "DDT|1"],
            ["FATTURA|1", "DDT|999"],
        )

        result = import_package(package_dir)

        assert counts_for(result, "DocumentLink") == {"inserted": 1, "updated": 0, "skipped": 1, "errors": 1}
        assert test_db().query(DocumentLink).count() == 1


# ============================================================================
# Deferred references
# ============================================================================


class TestDeferredReferences:
    """Tests for references resolved in a second pass."""

    @pytest.mark.parametrize("origin_first", [True, False])
    def test_document_origin_in_either_order(self, test_db, sample_masters, package_dir, origin_first):
        ddt = ["DDT", "1", "2024-01-05", "C001", ""]
        invoice = ["FATTURA", "1", "2024-01-31", "C001", "DDT|1"]
        rows = [ddt, invoice] if origin_first else [invoice, ddt]
        write_file(package_dir, "30_documenti.csv", DOCUMENT_HEADER, *rows)

        result = import_package(package_dir)

        assert result.inserted == 2
        assert result.errors == 0
        session = test_db()
        ddt_doc = session.query(Document).filter_by(document_type="DDT").one()
        invoice_doc = session.query(Document).filter_by(document_type="FATTURA").one()
        assert invoice_doc.origin_document_id == ddt_doc.id
        assert result.stages[0].deferred_resolved == 1

    def test_unresolvable_deferred_left_unset(self, test_db, sample_masters, package_dir):
        write_file(
            package_dir,
            "30_documenti.csv",
            DOCUMENT_HEADER,
            ["FATTURA", "1", "2024-01-31", "C001", "DDT|404"],
        )

        result = import_package(package_dir)

        assert result.inserted == 1
        assert result.errors == 0
        assert test_db().query(Document).one().origin_document_id is None

    def test_account_parents(self, test_db, package_dir):
        write_file(
            package_dir,
            "40_piano_dei_conti.csv",
            ["Codice", "Descrizione", "ContoSuperioreCodice", "Livello", "ContoFoglia"],
            ["01.01", "Cassa", "01", "2", "1"],
            ["01", "Attivita", "", "1", "0"],
        )

        import_package(package_dir)

        session = test_db()
        parent = session.query(Account).filter_by(code="01").one()
        child = session.query(Account).filter_by(code="01.01").one()
        assert child.parent_id == parent.id
        assert parent.parent_id is None
        assert parent.is_leaf is False

    def test_service_ticket_forward_document_references(self, test_db, sample_masters, package_dir):
        write_file(
            package_dir,
            "13_schede_assistenza.csv",
            ["NumeroScheda", "DataApertura", "ClienteCodice", "DocumentoCaricoKey", "DocumentoScaricoKey"],
            ["SA1", "2024-06-01", "C001", "DDT_IN|3", "DDT|4"],
        )
        write_file(
            package_dir,
            "30_documenti.csv",
            DOCUMENT_HEADER,
            ["DDT_IN", "3", "2024-06-01", "C001", ""],
        )

        import_package(package_dir)

        session = test_db()
        ticket = session.query(ServiceTicket).one()
        intake = session.query(Document).filter_by(document_type="DDT_IN").one()
        assert ticket.intake_document_id == intake.id
        assert ticket.delivery_document_id is None

    def test_forward_reference_resolved_without_document_file(
        self, test_db, sample_masters, package_dir
    ):
        session = test_db()
        session.add(Document(document_type="DDT", number="4", document_date=date(2024, 6, 1)))
        session.commit()
        write_file(
            package_dir,
            "13_schede_assistenza.csv",
            ["NumeroScheda", "ClienteCodice", "DocumentoScaricoKey"],
            ["SA2", "C001", "DDT|4"],
        )

        import_package(package_dir)

        ticket = test_db().query(ServiceTicket).one()
        assert ticket.delivery_document_id is not None


# ============================================================================
# Orchestration
# ============================================================================


class TestOrchestration:
    """Tests for file discovery, hooks and results."""

    def test_missing_directory(self, test_db, tmp_path):
        with pytest.raises(PackageNotFoundError):
            import_package(tmp_path / "nowhere")

    def test_blank_directory(self, test_db):
        with pytest.raises(PackageNotFoundError):
            import_package("  ")

    def test_empty_package(self, test_db, package_dir):
        result = import_package(package_dir)

        assert result.files_read == 0
        assert result.inserted == 0

    def test_header_only_file_counts_as_read(self, test_db, package_dir):
        write_file(package_dir, "01_agenti.csv", ["Codice", "Nome"])

        result = import_package(package_dir)

        assert result.files_read == 1
        assert result.stages[0].rows_processed == 0

    def test_main_warehouse_ensured(self, test_db, package_dir):
        write_file(
            package_dir,
            "03_magazzini.csv",
            ["Codice", "Descrizione", "Principale"],
            ["MAG_A", "A", "0"],
            ["MAG_B", "B", "0"],
        )

        import_package(package_dir)

        session = test_db()
        main = session.query(Warehouse).filter(Warehouse.is_main.is_(True)).all()
        assert [w.code for w in main] == ["MAG_A"]

    def test_existing_main_warehouse_kept(self, test_db, sample_masters, package_dir):
        write_file(package_dir, "03_magazzini.csv", ["Codice", "Descrizione"], ["MAG_Z", "Z"])

        import_package(package_dir)

        main = test_db().query(Warehouse).filter(Warehouse.is_main.is_(True)).one()
        assert main.code == "MAG01"

    def test_summary(self, test_db, sample_masters, package_dir):
        write_file(
            package_dir,
            "04_fornitori.csv",
            ["Codice", "RagioneSociale"],
            ["F001", "Forniture Srl"],
            ["F002", ""],
            ["", "x"],
        )

        result = import_package(package_dir)
        summary = result.get_summary()

        assert "04_fornitori.csv: 1 updated, 1 skipped, 1 errors" in summary
        assert "Files read: 1" in summary
        assert result.to_dict()["entity_counts"]["Supplier"]["errors"] == 1
        assert result.has_errors
